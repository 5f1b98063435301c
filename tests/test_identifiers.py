"""Tests for the external identifier registry."""

from types import SimpleNamespace

from app.services.identifiers import IdentifierRegistry


def make_restaurants(*durable_ids):
    return [SimpleNamespace(restaurant_id=durable_id) for durable_id in durable_ids]


class TestRebuild:
    """Tests for IdentifierRegistry.rebuild."""

    def test_assigns_one_based_ids_in_input_order(self):
        registry = IdentifierRegistry()

        mapping = registry.rebuild(make_restaurants("c", "a", "b"))

        assert mapping == {"1": "c", "2": "a", "3": "b"}

    def test_ids_are_exactly_one_to_n(self):
        registry = IdentifierRegistry()
        durable_ids = [f"uuid-{n}" for n in range(25)]

        mapping = registry.rebuild(make_restaurants(*durable_ids))

        assert sorted(int(k) for k in mapping) == list(range(1, 26))
        assert len(set(mapping.values())) == 25
        assert [mapping[str(i + 1)] for i in range(25)] == durable_ids

    def test_rebuild_discards_previous_mapping(self):
        registry = IdentifierRegistry()
        registry.rebuild(make_restaurants("a", "b", "c"))

        registry.rebuild(make_restaurants("z"))

        assert registry.snapshot() == {"1": "z"}
        assert registry.size == 1

    def test_registry_has_no_len(self):
        registry = IdentifierRegistry()
        registry.rebuild(make_restaurants("a", "b"))

        assert registry.size == 2
        assert not hasattr(registry, "__len__")

    def test_returned_mapping_is_a_copy(self):
        registry = IdentifierRegistry()
        mapping = registry.rebuild(make_restaurants("a"))

        mapping["99"] = "tampered"

        assert registry.resolve("99") == "99"

    def test_empty_rebuild(self):
        registry = IdentifierRegistry()
        registry.rebuild(make_restaurants("a"))

        assert registry.rebuild([]) == {}
        assert registry.size == 0


class TestResolve:
    """Tests for IdentifierRegistry.resolve and reverse_lookup."""

    def test_resolve_known_id(self):
        registry = IdentifierRegistry()
        registry.rebuild(make_restaurants("a", "b"))

        assert registry.resolve("2") == "b"

    def test_resolve_accepts_integers(self):
        registry = IdentifierRegistry()
        registry.rebuild(make_restaurants("a", "b"))

        assert registry.resolve(1) == "a"

    def test_unknown_id_falls_back_to_itself(self):
        registry = IdentifierRegistry()
        registry.rebuild(make_restaurants("a"))

        assert registry.resolve("5e0b7a4e-durable") == "5e0b7a4e-durable"
        assert registry.resolve("7") == "7"

    def test_stale_id_after_rebuild_no_longer_maps(self):
        registry = IdentifierRegistry()
        registry.rebuild(make_restaurants("a", "b", "c"))
        registry.rebuild(make_restaurants("c"))

        assert registry.resolve("3") == "3"
        assert registry.resolve("1") == "c"

    def test_reverse_lookup(self):
        registry = IdentifierRegistry()
        registry.rebuild(make_restaurants("a", "b"))

        assert registry.reverse_lookup("b") == 2
        assert registry.reverse_lookup("missing") is None

    def test_reverse_lookup_returns_first_match(self):
        registry = IdentifierRegistry()
        registry.rebuild(make_restaurants("dup", "dup"))

        assert registry.reverse_lookup("dup") == 1

    def test_resolve_of_reverse_lookup_round_trips(self):
        registry = IdentifierRegistry()
        durable_ids = ["a1", "b2", "c3", "d4"]
        registry.rebuild(make_restaurants(*durable_ids))

        for durable_id in durable_ids:
            assert registry.resolve(str(registry.reverse_lookup(durable_id))) == durable_id
