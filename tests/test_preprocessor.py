import pytest

from cssforge.exceptions import StyleSyntaxError
from cssforge.preprocessor import Preprocessor, join_selectors, split_top_level


@pytest.fixture
def preprocessor() -> Preprocessor:
    return Preprocessor()


def test_flat_declarations(preprocessor: Preprocessor) -> None:
    assert preprocessor.compile(".css-1", "color:blue;font-size:12px;") == [".css-1{color:blue;font-size:12px;}"]


def test_declaration_whitespace_is_normalized(preprocessor: Preprocessor) -> None:
    rules = preprocessor.compile(".a", "\n  color : red ;\n  border:  1px   solid  black\n")
    assert rules == [".a{color:red;border:1px solid black;}"]


def test_parent_reference(preprocessor: Preprocessor) -> None:
    rules = preprocessor.compile(".a", "color:red;&:hover{color:blue;}")
    assert rules == [".a{color:red;}", ".a:hover{color:blue;}"]


def test_descendant_and_pseudo_selectors(preprocessor: Preprocessor) -> None:
    assert preprocessor.compile(".a", "color:red; .child { margin: 0 }") == [".a{color:red;}", ".a .child{margin:0;}"]
    assert preprocessor.compile(".a", ":hover{color:blue;}") == [".a:hover{color:blue;}"]


def test_selector_lists(preprocessor: Preprocessor) -> None:
    assert preprocessor.compile(".a", "h1, h2{margin:0;}") == [".a h1,.a h2{margin:0;}"]


def test_media_query_wraps_scoped_rules(preprocessor: Preprocessor) -> None:
    assert preprocessor.compile(".a", "@media (min-width: 100px){color:green;}") == [
        "@media (min-width: 100px){.a{color:green;}}"
    ]
    assert preprocessor.compile(".a", "@media print{&:hover{color:red;}}") == ["@media print{.a:hover{color:red;}}"]


def test_keyframes_block(preprocessor: Preprocessor) -> None:
    rules = preprocessor.compile("", "@keyframes fade{from{opacity:0;}to{opacity:1;}}")
    assert rules == ["@keyframes fade{from{opacity:0;}to{opacity:1;}}"]


def test_font_face_block(preprocessor: Preprocessor) -> None:
    rules = preprocessor.compile("", "@font-face{font-family:Foo;src:url(foo.woff);}")
    assert rules == ["@font-face{font-family:Foo;src:url(foo.woff);}"]


def test_global_rules_and_statements(preprocessor: Preprocessor) -> None:
    rules = preprocessor.compile("", "@import url(foo.css);body{margin:0;}html{color:red;}")
    assert rules == ["@import url(foo.css);", "body{margin:0;}", "html{color:red;}"]


def test_declarations_without_selector_are_dropped(preprocessor: Preprocessor) -> None:
    assert preprocessor.compile("", "color:red;") == []


def test_semicolons_in_parentheses_and_strings(preprocessor: Preprocessor) -> None:
    rules = preprocessor.compile(".a", "background:url(data:image/png;base64,AAA);content:\"{;}\";")
    assert rules == ['.a{background:url(data:image/png;base64,AAA);content:"{;}";}']


def test_comments_and_empty_declarations_are_dropped(preprocessor: Preprocessor) -> None:
    assert preprocessor.compile(".a", "/* note */color:red;width:;") == [".a{color:red;}"]


def test_plugins_run_in_order(preprocessor: Preprocessor) -> None:
    seen = []

    def upper(rule: str, source_map: str) -> str:
        return rule.upper()

    def record(rule: str, source_map: str) -> None:
        seen.append((rule, source_map))

    rules = preprocessor.compile(".a", "color:red;", plugins=[upper, record], source_map="/*map*/")
    assert rules == [".A{COLOR:RED;}"]
    assert seen == [(".A{COLOR:RED;}", "/*map*/")]


def test_plugin_can_drop_rules(preprocessor: Preprocessor) -> None:
    seen = []
    rules = preprocessor.compile(
        ".a",
        "color:red;&:hover{color:blue;}",
        plugins=[lambda rule, _: "" if ":hover" in rule else None, lambda rule, _: seen.append(rule)],
    )
    assert rules == [".a{color:red;}"]
    assert seen == [".a{color:red;}"]


def test_unbalanced_braces_raise(preprocessor: Preprocessor) -> None:
    with pytest.raises(StyleSyntaxError):
        preprocessor.compile(".a", "color:red;}")
    with pytest.raises(StyleSyntaxError) as excinfo:
        preprocessor.compile(".a", "&:hover{color:red;")
    assert excinfo.value.selector == ".a"


def test_unterminated_comment_raises(preprocessor: Preprocessor) -> None:
    with pytest.raises(StyleSyntaxError):
        preprocessor.compile(".a", "color:red;/* oops")


def test_split_top_level() -> None:
    assert split_top_level("a, :is(b, c), d") == ["a", ":is(b, c)", "d"]


def test_join_selectors() -> None:
    assert join_selectors([".a"], "& + &") == [".a + .a"]
    assert join_selectors([".a", ".b"], "span") == [".a span", ".b span"]
    assert join_selectors([], "body") == ["body"]
