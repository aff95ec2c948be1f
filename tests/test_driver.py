"""Tests for the code generation driver."""

from pathlib import PurePosixPath

import pytest

from tree_builder import build_registry
from tree_builder.codegen import get_backend
from tree_builder.codegen.core.config import GeneratorConfig
from tree_builder.codegen.core.driver import (
    KIND_API,
    KIND_CLASS,
    KIND_VISITOR,
    CodeGenerationDriver,
    generate_code,
)
from tree_builder.codegen.core.writer import FileWriter, MemoryWriter
from tree_builder.codegen.languages.perl import PerlBackend
from tree_builder.errors import OutputConflictError, OutputWriteError, RenderError
from tree_builder.model import FieldKind


def make_driver(language="perl", prefix="", writer=None, output_dir="."):
    config = GeneratorConfig(language=language, prefix=prefix, output_dir=output_dir)
    return CodeGenerationDriver(get_backend(language, config), config, writer)


class TestArtifacts:
    def test_artifact_count(self, expr_registry, memory_writer):
        result = make_driver(writer=memory_writer).generate(expr_registry)
        # 1 abstract + 3 concrete, plus API and Visitor
        assert len(result.artifacts) == 4 + 2
        assert len(result.of_kind(KIND_CLASS)) == 4
        assert len(result.of_kind(KIND_API)) == 1
        assert len(result.of_kind(KIND_VISITOR)) == 1
        assert len(memory_writer.files) == 6

    def test_emission_order(self, expr_registry, memory_writer):
        result = make_driver(writer=memory_writer).generate(expr_registry)
        assert [str(p) for p in result.paths] == [
            "Expr.pm",
            "Number.pm",
            "ExprList.pm",
            "EmptyExprList.pm",
            "API.pm",
            "Visitor.pm",
        ]

    def test_prefix_maps_to_directories(self, ops_registry, memory_writer):
        result = make_driver(prefix="My::Ast", writer=memory_writer).generate(
            ops_registry
        )
        assert PurePosixPath("My/Ast/Op/Plus.pm") in result.paths
        assert PurePosixPath("My/Ast/API.pm") in result.paths
        assert PurePosixPath("My/Ast/Visitor.pm") in result.paths
        names = [a.name for a in result.artifacts]
        assert "My::Ast::Op::Plus" in names
        assert "My::Ast::API" in names

    def test_dotted_prefix(self, expr_registry):
        rendered = make_driver(language="python", prefix="my.ast").render(expr_registry)
        assert "my/ast/Number.py" in rendered

    def test_metadata(self, expr_registry, memory_writer):
        result = make_driver(prefix="Demo", writer=memory_writer).generate(
            expr_registry
        )
        assert result.metadata["language"] == "perl"
        assert result.metadata["file_extension"] == ".pm"
        assert result.metadata["prefix"] == "Demo::"
        assert result.metadata["class_count"] == 4
        assert result.metadata["concrete_count"] == 3

    def test_empty_registry_still_gets_api_and_visitor(self, memory_writer):
        result = make_driver(writer=memory_writer).generate(build_registry(""))
        assert [str(p) for p in result.paths] == ["API.pm", "Visitor.pm"]

    def test_generate_code_helper(self, expr_registry, memory_writer):
        backend = get_backend("perl")
        result = generate_code(expr_registry, backend, writer=memory_writer)
        assert result.written_count == 6


class TestContexts:
    def test_class_context(self, expr_registry):
        driver = make_driver(prefix="Demo")
        context = driver.class_context(expr_registry["ExprList"])
        assert context.name == "Demo::ExprList"
        assert context.supertype is None
        assert context.source_name == "ExprList"
        assert [(f.name, f.accessor, f.kind, f.target) for f in context.fields] == [
            ("expr", "getExpr", FieldKind.CLASS_REF, "Demo::Expr"),
            ("exprList", "getExprList", FieldKind.CLASS_REF, "Demo::ExprList"),
        ]

    def test_supertype_is_prefixed(self, expr_registry):
        context = make_driver(prefix="Demo").class_context(
            expr_registry["EmptyExprList"]
        )
        assert context.supertype == "Demo::ExprList"
        assert context.fields == ()

    def test_scalar_field_has_no_target(self, expr_registry):
        context = make_driver().class_context(expr_registry["Number"])
        (value,) = context.fields
        assert value.is_scalar
        assert value.target is None

    def test_api_lists_only_concrete_classes(self, expr_registry):
        api = make_driver(prefix="Demo").api_context(expr_registry)
        assert api.name == "Demo::API"
        assert list(api.classes) == [
            "Demo::Number",
            "Demo::ExprList",
            "Demo::EmptyExprList",
        ]
        assert [(e.short_name, e.args) for e in api.entries] == [
            ("Number", ("value",)),
            ("ExprList", ("expr", "exprList")),
            ("EmptyExprList", ()),
        ]

    def test_visitor_methods(self, expr_registry):
        visitor = make_driver().visitor_context(expr_registry)
        assert visitor.name == "Visitor"
        assert [m.method_name for m in visitor.methods] == [
            "visitNumber",
            "visitExprList",
            "visitEmptyExprList",
        ]
        assert visitor.methods[1].children == ("getExpr", "getExprList")
        assert visitor.methods[0].children == ()
        assert visitor.combine_name == "combine"


class TestDeterminism:
    def test_identical_runs_are_byte_identical(self, expr_config, tmp_path):
        for run in ("a", "b"):
            registry = build_registry(expr_config)
            make_driver(prefix="Demo", output_dir=str(tmp_path / run)).generate(
                registry
            )

        first = {
            p.relative_to(tmp_path / "a"): p.read_bytes()
            for p in (tmp_path / "a").rglob("*")
            if p.is_file()
        }
        second = {
            p.relative_to(tmp_path / "b"): p.read_bytes()
            for p in (tmp_path / "b").rglob("*")
            if p.is_file()
        }
        assert len(first) == 6
        assert first == second

    def test_second_run_leaves_files_untouched(self, expr_registry, tmp_path):
        driver = make_driver(output_dir=str(tmp_path))
        assert driver.generate(expr_registry).written_count == 6
        result = driver.generate(expr_registry)
        assert result.written_count == 0
        assert all(not a.written for a in result.artifacts)

    def test_render_matches_written_files(self, expr_registry, tmp_path):
        driver = make_driver(output_dir=str(tmp_path))
        rendered = driver.render(expr_registry)
        driver.generate(expr_registry)
        for path, text in rendered.items():
            assert (tmp_path / path).read_text(encoding="utf-8") == text


class FailingBackend(PerlBackend):
    def render_concrete_class(self, context):
        if context.name == "ExprList":
            raise RenderError("boom", self.concrete_template)
        return super().render_concrete_class(context)


class TestFailures:
    def test_render_failure_aborts_without_rollback(self, expr_registry, memory_writer):
        driver = CodeGenerationDriver(FailingBackend(), writer=memory_writer)
        with pytest.raises(RenderError):
            driver.generate(expr_registry)
        assert sorted(memory_writer.files) == ["Expr.pm", "Number.pm"]

    def test_write_failure(self, expr_registry, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        driver = make_driver(writer=FileWriter(blocker / "out"))
        with pytest.raises(OutputWriteError):
            driver.generate(expr_registry)

    def test_writer_defaults_to_output_dir(self, tmp_path):
        driver = make_driver(output_dir=str(tmp_path))
        assert isinstance(driver.writer, FileWriter)
        assert driver.writer.root == tmp_path


class TestOutputConflicts:
    @pytest.mark.parametrize("name", ["API", "Visitor"])
    def test_class_named_like_whole_model_artifact(self, name, memory_writer):
        registry = build_registry(f"Leaf()\n{name}(scalar x)\n")
        with pytest.raises(OutputConflictError) as exc_info:
            make_driver(writer=memory_writer).generate(registry)
        assert exc_info.value.name == name
        assert f"class '{name}'" in str(exc_info.value)
        assert exc_info.value.path == PurePosixPath(f"{name}.pm")

    def test_nothing_is_written_on_conflict(self, memory_writer):
        registry = build_registry("Visitor(scalar x)\nAPI()\n")
        with pytest.raises(OutputConflictError):
            make_driver(writer=memory_writer).generate(registry)
        assert memory_writer.files == {}

    def test_render_checks_layout_too(self):
        with pytest.raises(OutputConflictError):
            make_driver().render(build_registry("API()"))

    def test_conflict_follows_the_prefix(self, memory_writer):
        with pytest.raises(OutputConflictError):
            make_driver(prefix="Ast", writer=memory_writer).generate(
                build_registry("Visitor()")
            )
        registry = build_registry("Ast::Visitor(scalar x)")
        result = make_driver(prefix="Ast", writer=memory_writer).generate(registry)
        assert PurePosixPath("Ast/Ast/Visitor.pm") in result.paths
        assert len(memory_writer.files) == len(result.artifacts) == 3


class TestMemoryWriter:
    def test_records_posix_paths(self):
        writer = MemoryWriter()
        assert writer.write(PurePosixPath("A/B.pm"), "x")
        assert not writer.write(PurePosixPath("A/B.pm"), "x")
        assert writer.files == {"A/B.pm": "x"}
