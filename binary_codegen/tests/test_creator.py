import ast

from binary_codegen.config import CodeGeneratorConfig
from binary_codegen.emitters import CreatorEmitter
from binary_codegen.introspection import describe
from binary_codegen.synthesis import TypeSynthesis
from binary_codegen.tests.models import Line, Person, Point


def emit_creator(tp):
    synthesis = TypeSynthesis.build(describe(tp), "app.generated")
    return synthesis, CreatorEmitter(CodeGeneratorConfig(add_generation_comment=False)).emit(synthesis)


class TestCreatorEmitter:
    def test_one_lookup_per_distinct_type(self):
        """Both members of Line are Points: one lookup, passed twice"""
        synthesis, unit = emit_creator(Line)

        assert unit.text.count("context.get_converter(") == 1
        assert "cvt_T0 = context.get_converter(_T0)" in unit.text
        assert f"converter = {synthesis.converter_name}(cvt_T0, cvt_T0)" in unit.text

    def test_lookups_in_member_order(self):
        synthesis, unit = emit_creator(Person)

        assert unit.text.index("cvt_T0 = ") < unit.text.index("cvt_T1 = ")
        assert f"converter = {synthesis.converter_name}(cvt_T0, cvt_T1)" in unit.text

    def test_answers_only_for_its_target(self):
        _, unit = emit_creator(Point)
        assert "if type_ != _TSelf:\n            return None" in unit.text

    def test_imports_converter_from_namespace(self):
        synthesis, unit = emit_creator(Point)

        assert unit.name == f"{synthesis.creator_name}.py"
        assert synthesis.creator_name == "binary_codegen_tests_models_Point_ConverterCreator"
        assert f"from app.generated.{synthesis.converter_name} import {synthesis.converter_name}" in unit.text
        ast.parse(unit.text)
