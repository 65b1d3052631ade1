import pytest

from binary_codegen.cancellation import CancellationToken
from binary_codegen.config import CodeGeneratorConfig
from binary_codegen.descriptors import ContextDeclaration, MemberDescriptor, MemberKind, TypeDescriptor, TypeRef
from binary_codegen.diagnostics import DiagnosticSeverity
from binary_codegen.driver import GenerationDriver
from binary_codegen.emitters import REGISTRY_UNIT_NAME
from binary_codegen.introspection import declare_context, describe
from binary_codegen.tests.models import Line, Locked, Measurement, Order, Order_Item, Pair, Person, Point, Settings, Shuffled

INT = TypeRef("builtins", "int")

DUPLICATE_SLOTS = TypeDescriptor(
    self_type=TypeRef("app.models", "Clash"),
    members=(
        MemberDescriptor("a", MemberKind.FIELD, INT, slot_index=0),
        MemberDescriptor("b", MemberKind.FIELD, INT, slot_index=0),
    ),
)


@pytest.fixture
def driver():
    return GenerationDriver(CodeGeneratorConfig(add_generation_comment=False))


def codes(result):
    return [d.code for d in result.diagnostics]


class TestContextValidation:
    def test_not_extensible(self, driver):
        result = driver.run(declare_context("Frozen", "app.generated", [Point], extensible=False))

        assert codes(result) == ["BINSRCGEN01"]
        assert result.has_errors
        assert result.units == []

    def test_no_namespace(self, driver):
        result = driver.run(declare_context("Loose", None, [Point]))

        assert codes(result) == ["BINSRCGEN02"]
        assert result.diagnostics[0].context == "Loose"
        assert result.units == []


class TestGeneration:
    def test_units_and_registry(self, driver):
        result = driver.run(declare_context("Ctx", "app.generated", [Point, Line]))

        assert result.diagnostics == []
        assert [u.name for u in result.units] == [
            "binary_codegen_tests_models_Point_Converter.py",
            "binary_codegen_tests_models_Point_ConverterCreator.py",
            "binary_codegen_tests_models_Line_Converter.py",
            "binary_codegen_tests_models_Line_ConverterCreator.py",
            REGISTRY_UNIT_NAME,
        ]
        assert result.creators == [
            "binary_codegen_tests_models_Point_ConverterCreator",
            "binary_codegen_tests_models_Line_ConverterCreator",
        ]

    def test_registry_lists_creators_in_order(self, driver):
        registry = driver.run(declare_context("Ctx", "app.generated", [Line, Point])).unit(REGISTRY_UNIT_NAME).text

        assert "CONVERTER_CREATORS = (" in registry
        assert registry.index("    binary_codegen_tests_models_Line_ConverterCreator(),") < registry.index(
            "    binary_codegen_tests_models_Point_ConverterCreator(),"
        )

    def test_registry_name_is_configurable(self):
        driver = GenerationDriver(CodeGeneratorConfig(registry_name="CREATORS"))
        registry = driver.run(declare_context("Ctx", "app.generated", [Point])).unit(REGISTRY_UNIT_NAME).text
        assert "CREATORS = (" in registry

    def test_empty_context_still_has_registry(self, driver):
        result = driver.run(declare_context("Ctx", "app.generated", []))
        assert [u.name for u in result.units] == [REGISTRY_UNIT_NAME]

    def test_unknown_unit(self, driver):
        with pytest.raises(KeyError):
            driver.run(declare_context("Ctx", "app.generated", [])).unit("missing.py")

    def test_order_is_deterministic(self):
        types = [Point, Line, Measurement, Pair, Shuffled, Settings, Person]
        context = declare_context("Ctx", "app.generated", types)
        runs = [GenerationDriver(CodeGeneratorConfig(max_workers=workers)).run(context) for workers in (1, 4, 8)]

        assert len({tuple(r.creators) for r in runs}) == 1
        assert len({tuple(u.name for u in r.units) for r in runs}) == 1
        assert runs[0].creators[0] == "binary_codegen_tests_models_Point_ConverterCreator"

    def test_run_all(self, driver):
        results = driver.run_all(
            [declare_context("First", "app.first", [Point]), declare_context("Second", None, [Point])]
        )
        assert [r.context_name for r in results] == ["First", "Second"]
        assert not results[0].has_errors
        assert results[1].has_errors


class TestPerTypeProblems:
    def test_duplicate_include(self, driver):
        result = driver.run(declare_context("Ctx", "app.generated", [Point, Line, Point]))

        assert codes(result) == ["BINSRCGEN03"]
        assert result.diagnostics[0].severity is DiagnosticSeverity.WARNING
        assert not result.has_errors
        assert len(result.creators) == 2

    def test_decode_not_supported(self, driver):
        result = driver.run(declare_context("Ctx", "app.generated", [Locked]))

        assert codes(result) == ["BINSRCGEN04"]
        assert not result.has_errors
        assert len(result.creators) == 1

    def test_duplicate_slot_skips_only_that_type(self, driver):
        context = ContextDeclaration("Ctx", "app.generated", includes=(DUPLICATE_SLOTS, describe(Point)))
        result = driver.run(context)

        assert codes(result) == ["BINSRCGEN05"]
        assert result.has_errors
        assert "Slot index 0" in result.diagnostics[0].message
        assert result.creators == ["binary_codegen_tests_models_Point_ConverterCreator"]

    def test_converter_name_collision_skips_later_type(self, driver):
        result = driver.run(declare_context("Ctx", "app.generated", [Order.Item, Order_Item, Point]))

        assert codes(result) == ["BINSRCGEN06"]
        assert result.has_errors
        assert "binary_codegen.tests.models.Order_Item" in result.diagnostics[0].message
        assert "binary_codegen.tests.models.Order.Item" in result.diagnostics[0].message
        assert result.creators == [
            "binary_codegen_tests_models_Order_Item_ConverterCreator",
            "binary_codegen_tests_models_Point_ConverterCreator",
        ]
        names = [u.name for u in result.units]
        assert len(names) == len(set(names)) == 5


class CancelOnCheck(CancellationToken):
    """Cancels itself on its n-th check."""

    def __init__(self, n):
        super().__init__()
        self.remaining = n

    def throw_if_cancelled(self):
        self.remaining -= 1
        if self.remaining == 0:
            self.cancel()
        super().throw_if_cancelled()


class TestCancellation:
    def test_cancelled_pass_keeps_no_artifacts(self, driver):
        token = CancellationToken()
        token.cancel()
        result = driver.run(declare_context("Ctx", "app.generated", [Point, Line]), token)

        assert result.cancelled == [TypeRef.of(Point), TypeRef.of(Line)]
        assert result.creators == []
        assert [u.name for u in result.units] == [REGISTRY_UNIT_NAME]

    def test_cancelled_inside_member_loop(self, driver):
        # The first check passes, the second happens while Line's members are resolved
        result = driver.run(declare_context("Ctx", "app.generated", [Line]), CancelOnCheck(2))

        assert result.cancelled == [TypeRef.of(Line)]
        assert result.creators == []
        assert [u.name for u in result.units] == [REGISTRY_UNIT_NAME]

    @pytest.mark.parametrize("n", range(2, 40))
    def test_type_is_all_or_nothing(self, n):
        driver = GenerationDriver(CodeGeneratorConfig(add_generation_comment=False, max_workers=1))
        result = driver.run(declare_context("Ctx", "app.generated", [Measurement]), CancelOnCheck(n))

        names = [u.name for u in result.units]
        if result.cancelled:
            assert result.creators == []
            assert names == [REGISTRY_UNIT_NAME]
        else:
            assert result.creators == ["binary_codegen_tests_models_Measurement_ConverterCreator"]
            assert names == [
                "binary_codegen_tests_models_Measurement_Converter.py",
                "binary_codegen_tests_models_Measurement_ConverterCreator.py",
                REGISTRY_UNIT_NAME,
            ]

    def test_token_is_not_cancelled_by_default(self):
        token = CancellationToken()
        assert not token.is_cancelled
        token.throw_if_cancelled()
        token.cancel()
        assert token.is_cancelled


def test_diagnostic_str():
    result = GenerationDriver().run(declare_context("Loose", None, []))
    assert str(result.diagnostics[0]).startswith("error BINSRCGEN02: ")
