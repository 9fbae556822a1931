"""
Tests for the description collector (declaration source -> descriptions).

The syntactic walk must rebuild exactly the paths the reflective walk
produces. Most tests therefore assert on full path -> summary dicts.
"""

from operator import attrgetter

import pytest

from propcollect.descriptions import (
    DescriptionParseError,
    collect_descriptions,
    collect_descriptions_from_string,
    describe_fields,
    summarize,
)
from propcollect.model import Field, PropertyMapping


SOURCE = '''
class A:
    #: Top level value.
    x: int = 1

    class B:
        #: Inner value.
        #: Spans two lines.
        x: int = 2

        class D:
            y: int = 0

    class C:
        x: int = 3
        """Attribute docstring of C.x."""

    z: int = 4
'''


def make_field(path):
    parts = path.split(".")
    return Field(
        name=parts[-1],
        container_name=parts[-2] if len(parts) > 1 else "",
        canonical_path=path,
        declared_type=object,
        reader=attrgetter(parts[-1]),
    )


def make_mapping(*paths):
    mapping = PropertyMapping()
    for path in paths:
        mapping.add(make_field(path))
    return mapping


class TestDescribeFields:

    def test_paths_and_summaries(self):
        assert describe_fields(SOURCE, "A") == {
            "A.x": "Top level value.",
            "A.B.x": "Inner value. Spans two lines.",
            "A.B.D.y": "",
            "A.C.x": "Attribute docstring of C.x.",
            "A.z": "",
        }

    def test_field_after_nested_class_uses_own_path(self):
        """z follows B and C in A's body; stale nested entries must not leak into its path."""
        assert "A.z" in describe_fields(SOURCE, "A")
        assert "A.C.z" not in describe_fields(SOURCE, "A")

    def test_nested_root_includes_enclosing_classes(self):
        assert describe_fields(SOURCE, "B") == {
            "A.B.x": "Inner value. Spans two lines.",
            "A.B.D.y": "",
        }

    def test_nested_root_without_enclosing_classes(self):
        assert describe_fields(SOURCE, "B", include_enclosing=False) == {
            "B.x": "Inner value. Spans two lines.",
            "B.D.y": "",
        }

    def test_only_root_class_is_walked(self):
        source = (
            "class Other:\n"
            "    #: Not this one.\n"
            "    x: int = 0\n"
            "\n"
            "class A:\n"
            "    x: int = 1\n"
        )
        assert describe_fields(source, "A") == {"A.x": ""}

    def test_properties_class_vars_and_private_names(self):
        source = (
            "from typing import ClassVar\n"
            "class A:\n"
            "    registry: ClassVar[dict] = {}\n"
            "    _hidden: int = 0\n"
            "    plain = 5\n"
            "\n"
            "    @property\n"
            "    def size(self) -> int:\n"
            '        """Size in bytes.\n'
            "\n"
            '        Computed on access."""\n'
            "        return 0\n"
            "\n"
            "    #: Commented property.\n"
            "    @property\n"
            "    def weight(self):\n"
            '        """Ignored docstring."""\n'
            "        return 0\n"
            "\n"
            "    def method(self):\n"
            "        pass\n"
        )
        assert describe_fields(source, "A") == {
            "A.size": "Size in bytes.",
            "A.weight": "Commented property.",
        }

    def test_plain_comments_are_not_documentation(self):
        source = (
            "class A:\n"
            "    # just a note\n"
            "    x: int = 1\n"
            "    #: Separated by a blank line.\n"
            "\n"
            "    y: int = 2\n"
        )
        assert describe_fields(source, "A") == {"A.x": "", "A.y": ""}

    def test_class_inside_function(self):
        source = (
            "def factory():\n"
            "    class Local:\n"
            "        #: Local value.\n"
            "        v: int = 1\n"
            '        text = """\n'
            "less indented\n"
            '"""\n'
            "    return Local\n"
        )
        assert describe_fields(source, "Local") == {"Local.v": "Local value."}

    def test_class_nested_in_local_class_has_no_enclosing_chain(self):
        source = (
            "def factory():\n"
            "    class Outer:\n"
            "        class Inner:\n"
            "            #: Inner value.\n"
            "            x: int = 1\n"
            "    return Outer\n"
        )
        assert describe_fields(source, "Inner") == {"Inner.x": "Inner value."}
        assert describe_fields(source, "Outer") == {"Outer.Inner.x": "Inner value."}

    def test_classes_and_fields_in_conditional_blocks(self):
        source = (
            "class Guarded:\n"
            "    if True:\n"
            "        class Cond:\n"
            "            #: Conditional value.\n"
            "            y: int = 2\n"
            "    try:\n"
            "        #: Guarded value.\n"
            "        z: int = 3\n"
            "    except ImportError:\n"
            "        pass\n"
        )
        assert describe_fields(source, "Cond") == {"Guarded.Cond.y": "Conditional value."}
        assert describe_fields(source, "Guarded") == {
            "Guarded.Cond.y": "Conditional value.",
            "Guarded.z": "Guarded value.",
        }

    def test_decorated_class(self):
        source = (
            "from dataclasses import dataclass\n"
            "class Outer:\n"
            "    @dataclass\n"
            "    class Inner:\n"
            "        #: Documented.\n"
            "        n: int = 0\n"
        )
        assert describe_fields(source, "Inner") == {"Outer.Inner.n": "Documented."}

    def test_duplicate_class_name_warns(self):
        source = (
            "class A:\n"
            "    #: First.\n"
            "    x: int = 1\n"
            "class B:\n"
            "    class A:\n"
            "        #: Second.\n"
            "        x: int = 2\n"
        )
        with pytest.warns(UserWarning):
            assert describe_fields(source, "A") == {"A.x": "First."}

    def test_missing_class(self):
        with pytest.raises(DescriptionParseError):
            describe_fields(SOURCE, "Missing")

    def test_syntax_error(self):
        with pytest.raises(DescriptionParseError):
            describe_fields("class A(:\n    x: int\n", "A")


class TestCollectDescriptions:

    def test_exact_path_match_only(self):
        mapping = make_mapping("A.B.x", "A.E.x")
        collect_descriptions_from_string(SOURCE, mapping, root_class="A")
        assert mapping["A.B.x"].description == "Inner value. Spans two lines."
        assert mapping["A.E.x"].description is None

    def test_root_class_from_first_field(self):
        mapping = make_mapping("A.B.x", "A.x")
        collect_descriptions_from_string(SOURCE, mapping)
        assert mapping["A.B.x"].description == "Inner value. Spans two lines."
        assert mapping["A.x"].description is None

    def test_undocumented_match_gets_empty_description(self):
        mapping = make_mapping("A.z")
        collect_descriptions_from_string(SOURCE, mapping, root_class="A")
        assert mapping["A.z"].description == ""

    def test_empty_mapping_returned_unchanged(self):
        mapping = PropertyMapping()
        assert collect_descriptions_from_string("not python at all (", mapping) is mapping

    def test_from_file(self, tmp_path):
        source = tmp_path / "decl.py"
        source.write_text(SOURCE)
        mapping = make_mapping("A.x")
        assert collect_descriptions(str(source), mapping) is mapping
        assert mapping["A.x"].description == "Top level value."

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            collect_descriptions(str(tmp_path / "nope.py"), make_mapping("A.x"))


class TestSummarize:

    def test_first_paragraph_only(self):
        assert summarize("First line\nsecond line.\n\nDetails.") == "First line second line."

    def test_strips_indentation_and_blank_lead(self):
        assert summarize("\n\n    Indented text.\n    ") == "Indented text."

    def test_empty(self):
        assert summarize("") == ""
