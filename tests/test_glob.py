"""Tests for swmanifest.tools.glob."""
import re

from swmanifest.tools.glob import compile_glob, glob_list_to_matcher, glob_to_regex, matches


def test_single_star_stays_within_segment() -> None:
    assert glob_to_regex("/*.js") == "\\/[^/]*\\.js"
    assert re.fullmatch(glob_to_regex("/*.js"), "/main.js")
    assert not re.fullmatch(glob_to_regex("/*.js"), "/lib/main.js")


def test_double_star_matches_any_depth() -> None:
    assert glob_to_regex("/**") == "\\/.*"
    assert glob_to_regex("/**/*.html") == "\\/(?:.+\\/)?[^/]*\\.html"
    matcher = glob_list_to_matcher(["/**/*.html"])
    assert matcher("/index.html")
    assert matcher("/a/b/c/page.html")
    assert not matcher("/a/b/c/page.htm")


def test_question_mark_modes() -> None:
    assert glob_to_regex("/api?x=1") == "\\/api[^/]x=1"
    assert glob_to_regex("/api?x=1", literal_question_mark=True) == "\\/api\\?x=1"


def test_plus_is_escaped() -> None:
    assert glob_to_regex("/c++/*.h") == "\\/c\\+\\+\\/[^/]*\\.h"


def test_compile_glob_records_negation() -> None:
    positive = compile_glob("/**/*.js")
    negative = compile_glob("!/**/*.js")
    assert positive.positive is True
    assert negative.positive is False
    assert positive.regex == negative.regex == "^\\/(?:.+\\/)?[^/]*\\.js$"


def test_negation_excludes_files_with_extension() -> None:
    patterns = [compile_glob("**"), compile_glob("!/**/*.*")]
    assert matches("app/main.js", patterns) is False
    assert matches("app/main", patterns) is True
    assert matches("/app/main.js", patterns) is False
    assert matches("/app/main", patterns) is True


def test_negative_pattern_never_produces_a_match() -> None:
    assert matches("/main.js", [compile_glob("!/**/*.css")]) is False
    assert matches("/main.js", []) is False


def test_fold_is_order_sensitive() -> None:
    exclude_then_include = [compile_glob("!/**/*.js"), compile_glob("/**")]
    include_then_exclude = [compile_glob("/**"), compile_glob("!/**/*.js")]
    assert matches("/main.js", exclude_then_include) is True
    assert matches("/main.js", include_then_exclude) is False


def test_later_positive_can_readmit_excluded_file() -> None:
    matcher = glob_list_to_matcher(["/assets/**", "!/assets/**/*.map", "/assets/keep.map"])
    assert matcher("/assets/app.css")
    assert not matcher("/assets/app.css.map")
    assert matcher("/assets/keep.map")


def test_relative_pattern_matches_relative_candidate() -> None:
    assert glob_list_to_matcher(["app/*.js"])("app/x.js")


def test_trailing_newline_is_not_matched() -> None:
    pattern = compile_glob("/*.js")
    assert pattern.test("/main.js")
    assert not pattern.test("/main.js\n")
