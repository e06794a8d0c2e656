from nx_datetime.codegen.core.classifier import classify_field
from nx_datetime.codegen.core.config import GeneratorConfig
from nx_datetime.codegen.core.planner import (
    AccessorPlanner,
    DuplicateAccessorError,
    accessor_name,
    plan_field,
)
from nx_datetime.codegen.core.schema import (
    Declaration,
    Field,
    HelperCall,
    HelperFunction,
    IntegerToDate,
    IntegerToText,
    ResultType,
    TextToDate,
    TextToText,
)


def classified(declaration, name):
    return classify_field(declaration, declaration.get_field(name))


def test_single_family_uses_prefix_and_field():
    assert accessor_name(TextToDate("yyyy", prefix="nx_"), "when", False) == "nx_when"
    assert accessor_name(TextToDate("yyyy"), "when", False) == "when"


def test_multiple_families_add_family_labels():
    assert accessor_name(TextToDate("yyyy", prefix="nx_"), "when", True) == "nx_Date_when"
    assert accessor_name(TextToText("a", "b", prefix="nx_"), "when", True) == "nx_String_when"
    assert accessor_name(TextToText("a", "b", prefix="nx_"), "when", True, "lower") == "nx_string_when"


def test_scenario_mixed_families(scenario_declaration):
    config = GeneratorConfig(family_label_case="lower")
    accessors = plan_field(classified(scenario_declaration, "dateOne"), config)

    assert [(a.name, a.result_type, a.nullable) for a in accessors] == [
        ("nx_string_dateOne", ResultType.TEXT, False),
        ("nx_date_dateOne", ResultType.DATE, True),
    ]
    assert accessors[0].expression == HelperCall(
        helper=HelperFunction.REFORMAT_TEXT,
        field_name="dateOne",
        arguments=(("origin_pattern", "yyyy-MM-dd"), ("target_pattern", "yyyy MMM dd")),
    )
    assert accessors[1].expression.helper == HelperFunction.PARSE_TEXT
    assert accessors[1].expression.arguments == (("origin_pattern", "yyyy-MM-dd"),)


def test_scenario_date_object_field(scenario_declaration):
    [accessor] = plan_field(classified(scenario_declaration, "dateTwo"))

    assert accessor.name == "nx_dateTwo"
    assert accessor.result_type == ResultType.TEXT
    assert not accessor.nullable
    assert accessor.expression.helper == HelperFunction.FORMAT_DATE
    assert accessor.expression.arguments == (("target_pattern", "dd MMM yyyy"),)


def test_same_family_directives_keep_plain_names():
    declaration = Declaration(
        name="Log",
        namespace="app",
        fields=(
            Field(
                "stamp",
                "int",
                directives=(IntegerToText("yyyy", prefix="year_"), IntegerToText("MM", prefix="month_")),
            ),
        ),
    )
    names = [a.name for a in plan_field(classified(declaration, "stamp"))]
    assert names == ["year_stamp", "month_stamp"]


def test_nullable_carrier_makes_every_accessor_nullable():
    declaration = Declaration(
        name="Log",
        namespace="app",
        fields=(Field("stamp", "int", directives=(IntegerToText("yyyy"),), nullable=True),),
    )
    [accessor] = plan_field(classified(declaration, "stamp"))
    assert accessor.nullable


def test_planner_rejects_name_shadowing_a_field():
    declaration = Declaration(
        name="Log",
        namespace="app",
        fields=(
            Field("stamp", "int", directives=(IntegerToDate(prefix="x_"),)),
            Field("x_stamp", "int", directives=(IntegerToText("yyyy", prefix="t_"),)),
        ),
    )
    fields = [classified(declaration, "stamp"), classified(declaration, "x_stamp")]
    plan, errors = AccessorPlanner().plan_declaration(declaration, fields)

    assert plan.accessor_names == ["t_x_stamp"]
    [error] = errors
    assert isinstance(error, DuplicateAccessorError)
    assert error.code == "DuplicateAccessor"
    assert error.accessor_name == "x_stamp"
    assert error.field_name == "stamp"
    assert "collides with a declared field" in str(error)


def test_planner_rejects_name_shadowing_a_member():
    declaration = Declaration(
        name="Log",
        namespace="app",
        fields=(
            Field(
                "stamp",
                "int",
                directives=(IntegerToText("yyyy", prefix="label_"), IntegerToText("MM", prefix="month_")),
            ),
        ),
        members=("label_stamp", "refresh"),
    )
    plan, errors = AccessorPlanner().plan_declaration(declaration, [classified(declaration, "stamp")])

    assert plan.accessor_names == ["month_stamp"]
    [error] = errors
    assert error.accessor_name == "label_stamp"
    assert "collides with a declared member" in str(error)


def test_planner_rejects_repeated_accessor_names():
    declaration = Declaration(
        name="Log",
        namespace="app",
        fields=(
            Field(
                "stamp",
                "int",
                directives=(IntegerToText("yyyy", prefix="p_"), IntegerToText("MM", prefix="p_")),
            ),
        ),
    )
    plan, errors = AccessorPlanner().plan_declaration(declaration, [classified(declaration, "stamp")])

    assert plan.accessor_names == ["p_stamp"]
    assert plan.accessors[0].expression.arguments == (("target_pattern", "yyyy"),)
    assert "another generated accessor" in str(errors[0])


def test_mixed_families_label_every_accessor():
    declaration = Declaration(
        name="Log",
        namespace="app",
        fields=(
            Field(
                "stamp",
                "int",
                directives=(IntegerToText("yyyy", prefix="a_"), IntegerToText("MM", prefix="b_"), IntegerToDate(prefix="c_")),
            ),
        ),
    )
    names = [a.name for a in plan_field(classified(declaration, "stamp"))]
    assert names == ["a_String_stamp", "b_String_stamp", "c_Date_stamp"]
