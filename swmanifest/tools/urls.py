"""Join URLs against a base href and turn URL globs into regexes."""
import re

from swmanifest.tools.glob import glob_to_regex

# A leading `.` of a relative base href (e.g. `./foo/`) would otherwise be
# matched as a literal character.
_RELATIVE_BASE_DOT = re.compile(r"^\.(?=/)")


def join_urls(base: str, relative: str) -> str:
    """Concatenate two URL parts with exactly one `/` between them."""
    if base.endswith("/") and relative.startswith("/"):
        return base + relative[1:]
    if not base.endswith("/") and not relative.startswith("/"):
        return base + "/" + relative
    return base + relative


def is_absolute_url(url: str) -> bool:
    """Absolute means rooted at `/` or carrying a scheme separator."""
    return url.startswith("/") or "://" in url


def url_to_regex(url: str, base_href: str, literal_question_mark: bool = False) -> str:
    """
    Compile a URL glob, prefixing relative URLs with `base_href`.

    Args:
        url: URL glob from the configuration
        base_href: Base path the application is served from
        literal_question_mark: Treat `?` as a literal (query string) character

    Returns:
        Unanchored regex source
    """
    if not is_absolute_url(url):
        url = join_urls(_RELATIVE_BASE_DOT.sub("", base_href), url)
    return glob_to_regex(url, literal_question_mark)
