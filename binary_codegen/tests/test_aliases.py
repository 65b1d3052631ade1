import pytest

from binary_codegen.aliases import SELF_ALIAS, TypeAliasRegistry
from binary_codegen.descriptors import TypeRef

INT = TypeRef("builtins", "int")
STR = TypeRef("builtins", "str")
PERSON = TypeRef("app.models", "Person")


class TestTypeAliasRegistry:
    def test_self_type_is_reserved(self):
        registry = TypeAliasRegistry(PERSON)
        assert registry.get_alias(PERSON) == SELF_ALIAS == "_TSelf"
        assert registry.add(PERSON) == "_TSelf"

    def test_first_seen_order(self):
        registry = TypeAliasRegistry(PERSON)
        assert registry.add(STR) == "_T0"
        assert registry.add(INT) == "_T1"
        assert registry.entries() == [
            ("_TSelf", "app.models.Person"),
            ("_T0", "builtins.str"),
            ("_T1", "builtins.int"),
        ]

    def test_repeated_type_gets_one_alias(self):
        """Two members of the same type share a single alias entry"""
        registry = TypeAliasRegistry(PERSON)
        assert registry.add(INT) == registry.add(TypeRef("builtins", "int"))
        assert len(registry) == 2
        assert INT in registry

    def test_generic_arguments_are_part_of_identity(self):
        registry = TypeAliasRegistry(PERSON)
        ints = registry.add(TypeRef("builtins", "list", (INT,)))
        strs = registry.add(TypeRef("builtins", "list", (STR,)))
        assert ints != strs

    def test_prologue(self):
        registry = TypeAliasRegistry(PERSON)
        registry.add(TypeRef("collections.abc", "Sequence", (TypeRef("app.values", "Money"),)))
        registry.add(INT)

        assert registry.prologue() == [
            "import app.models",
            "import app.values",
            "import builtins",
            "import collections.abc",
            "",
            "_TSelf = app.models.Person",
            "_T0 = collections.abc.Sequence[app.values.Money]",
            "_T1 = builtins.int",
        ]


class TestTypeRef:
    def test_of_class(self):
        assert TypeRef.of(int) == INT

    def test_of_generic_alias(self):
        assert TypeRef.of(dict[str, int]) == TypeRef("builtins", "dict", (STR, INT))
        assert TypeRef.of(dict[str, int]).arity == 2

    def test_of_optional(self):
        assert TypeRef.of(int | None).full_name == "typing.Union[builtins.int, types.NoneType]"

    def test_of_local_class_is_rejected(self):
        class Local:
            pass

        with pytest.raises(TypeError, match="local"):
            TypeRef.of(Local)
