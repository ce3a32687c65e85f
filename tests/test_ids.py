from resolink.ids import IdGenerator


def test_generates_two_unique():
    id_gen = IdGenerator()
    ids = [id_gen.next(), id_gen.next()]
    assert len(set(ids)) == 2
    assert ids[0].endswith("_0")
    assert ids[1].endswith("_1")


def test_prefixed_sequence():
    id_gen = IdGenerator("ABC")
    assert [id_gen.next() for _ in range(3)] == [
        "RS_REPL_ABC_0",
        "RS_REPL_ABC_1",
        "RS_REPL_ABC_2",
    ]


def test_default_prefix_is_upper_hex():
    id_gen = IdGenerator()
    value = id_gen.next()
    assert value.startswith("RS_REPL_")
    assert value.endswith("_0")
    prefix = value[len("RS_REPL_") : -len("_0")]
    assert 1 <= len(prefix) <= 8
    assert prefix == prefix.upper()
    assert 0 <= int(prefix, 16) <= 0xFFFFFFFF


def test_generators_count_independently():
    first = IdGenerator("P")
    second = IdGenerator("P")
    first.next()
    assert second.next() == "RS_REPL_P_0"


def test_iteration_matches_next():
    id_gen = IdGenerator("Z")
    assert next(iter(id_gen)) == "RS_REPL_Z_0"
    assert id_gen.next() == "RS_REPL_Z_1"