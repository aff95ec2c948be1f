"""Tests for the class registry and field naming."""

import pytest

from tree_builder import build_registry
from tree_builder.errors import (
    AbstractWithParamsError,
    DuplicateClassError,
    DuplicateFieldNameError,
    SemanticError,
    TreeBuildError,
    UnresolvedFieldTypeError,
    UnresolvedSupertypeError,
)
from tree_builder.model import ClassRegistry, FieldKind
from tree_builder.parser import parse_text


def field_names(registry, name):
    return [f.name for f in registry[name].fields]


def accessors(registry, name):
    return [f.accessor for f in registry[name].fields]


class TestEndToEndModel:
    def test_four_descriptors_in_order(self, expr_registry):
        assert len(expr_registry) == 4
        assert expr_registry.names() == ["Expr", "Number", "ExprList", "EmptyExprList"]
        assert [d.index for d in expr_registry] == [0, 1, 2, 3]

    def test_abstract_expr(self, expr_registry):
        expr = expr_registry["Expr"]
        assert expr.is_abstract
        assert expr.fields == ()
        assert expr.supertype is None

    def test_number_has_scalar_value(self, expr_registry):
        number = expr_registry["Number"]
        (value,) = number.fields
        assert value.name == "value"
        assert value.kind is FieldKind.SCALAR
        assert value.target is None
        assert value.explicit
        assert number.supertype is expr_registry["Expr"]

    def test_expr_list_is_self_referential(self, expr_registry):
        expr_list = expr_registry["ExprList"]
        assert field_names(expr_registry, "ExprList") == ["expr", "exprList"]
        assert accessors(expr_registry, "ExprList") == ["getExpr", "getExprList"]
        expr, tail = expr_list.fields
        assert expr.target is expr_registry["Expr"]
        assert tail.target is expr_list
        assert not expr.explicit

    def test_empty_expr_list(self, expr_registry):
        empty = expr_registry["EmptyExprList"]
        assert empty.supertype is expr_registry["ExprList"]
        assert empty.fields == ()
        assert not empty.is_abstract

    def test_concrete_and_abstract_views(self, expr_registry):
        assert [d.name for d in expr_registry.concrete_classes()] == [
            "Number",
            "ExprList",
            "EmptyExprList",
        ]
        assert [d.name for d in expr_registry.abstract_classes()] == ["Expr"]


class TestFieldNaming:
    def test_suffixes_in_declaration_order(self):
        registry = build_registry("abstract Expr()\nExpr Op::And(Expr, Expr)")
        assert field_names(registry, "Op::And") == ["expr1", "expr2"]
        assert accessors(registry, "Op::And") == ["getExpr1", "getExpr2"]

    def test_three_way_suffixes_with_other_fields_between(self):
        registry = build_registry(
            "abstract Expr()\nTernary(Expr, scalar, Expr, scalar op, Expr)"
        )
        assert field_names(registry, "Ternary") == [
            "expr1",
            "scalar",
            "expr2",
            "op",
            "expr3",
        ]

    def test_anonymous_scalars_are_numbered(self):
        registry = build_registry("Pair(scalar, scalar)")
        assert field_names(registry, "Pair") == ["scalar1", "scalar2"]

    def test_named_fields_do_not_count_towards_suffixes(self):
        registry = build_registry("abstract Expr()\nBin(Expr left, Expr)")
        assert field_names(registry, "Bin") == ["left", "expr"]

    def test_namespaced_type_uses_simple_name(self):
        registry = build_registry("abstract Op::Plus()\nHolder(Op::Plus)")
        assert field_names(registry, "Holder") == ["plus"]
        assert accessors(registry, "Holder") == ["getPlus"]

    def test_explicit_names_pass_through(self):
        registry = build_registry("Point(scalar X, scalar y)")
        assert field_names(registry, "Point") == ["X", "y"]
        assert accessors(registry, "Point") == ["getX", "getY"]

    def test_duplicate_explicit_names(self):
        with pytest.raises(DuplicateFieldNameError) as exc_info:
            build_registry("Point(scalar a, scalar a)")
        assert exc_info.value.name == "a"
        assert exc_info.value.class_name == "Point"

    def test_derived_name_colliding_with_explicit(self):
        with pytest.raises(DuplicateFieldNameError) as exc_info:
            build_registry("abstract Expr()\nFoo(Expr expr, Expr)")
        assert exc_info.value.name == "expr"


class TestSemanticErrors:
    def test_duplicate_class(self):
        with pytest.raises(DuplicateClassError) as exc_info:
            build_registry("abstract Expr()\nabstract Expr()")
        assert exc_info.value.name == "Expr"

    def test_abstract_with_params(self):
        with pytest.raises(AbstractWithParamsError) as exc_info:
            build_registry("abstract Expr(x)")
        assert exc_info.value.name == "Expr"

    def test_unresolved_supertype(self):
        with pytest.raises(UnresolvedSupertypeError) as exc_info:
            build_registry("Missing Foo()")
        assert exc_info.value.name == "Missing"
        assert exc_info.value.class_name == "Foo"

    def test_forward_supertype_reference(self):
        with pytest.raises(UnresolvedSupertypeError):
            build_registry("Base Derived()\nabstract Base()")

    def test_supertype_cannot_be_self(self):
        with pytest.raises(UnresolvedSupertypeError):
            build_registry("Foo Foo()")

    def test_unresolved_field_type(self):
        with pytest.raises(UnresolvedFieldTypeError) as exc_info:
            build_registry("Foo(Bar)")
        assert exc_info.value.name == "Bar"
        assert exc_info.value.class_name == "Foo"

    def test_forward_field_reference(self):
        with pytest.raises(UnresolvedFieldTypeError):
            build_registry("A(B)\nB()")

    def test_first_error_wins(self):
        with pytest.raises(DuplicateClassError):
            build_registry("A()\nA()\nB(Missing)")

    def test_hierarchy(self):
        for cls in (
            DuplicateClassError,
            UnresolvedSupertypeError,
            UnresolvedFieldTypeError,
            DuplicateFieldNameError,
            AbstractWithParamsError,
        ):
            assert issubclass(cls, SemanticError)
            assert issubclass(cls, TreeBuildError)


class TestRegistryAccess:
    def test_build_from_declarations(self):
        registry = ClassRegistry.build(parse_text("A()\nA B()"))
        assert "A" in registry
        assert "C" not in registry
        assert registry.get("C") is None
        assert registry["B"].supertype is registry["A"]

    def test_missing_name_raises_key_error(self, expr_registry):
        with pytest.raises(KeyError):
            expr_registry["Nope"]

    def test_empty_registry(self):
        registry = build_registry("")
        assert len(registry) == 0
        assert registry.concrete_classes() == []

    def test_descriptor_helpers(self, ops_registry):
        plus = ops_registry["Op::Plus"]
        assert plus.simple_name == "Plus"
        assert plus.namespace == ["Op"]
        assert [d.name for d in plus.ancestors()] == ["Op", "Expr"]
        assert plus.is_subclass_of(ops_registry["Expr"])
        assert not ops_registry["Number"].is_subclass_of(ops_registry["Op"])

    def test_class_fields(self, ops_registry):
        neg = ops_registry["Op::Neg"]
        assert [f.name for f in neg.class_fields()] == ["operand"]
        assert ops_registry["Number"].class_fields() == []

    def test_subclasses_of(self, ops_registry):
        names = [d.name for d in ops_registry.subclasses_of(ops_registry["Op"])]
        assert names == ["Op::Plus", "Op::Neg"]

    def test_classes_is_a_snapshot(self, expr_registry):
        classes = expr_registry.classes
        assert isinstance(classes, tuple)
        assert classes[0].name == "Expr"
