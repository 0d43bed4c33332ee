"""
Pytest fixtures for the assembler tests.

Test layout:
- unit: one module per test file, normal and failure cases split
- integration: full assemble() runs against a generated site
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from fabassemble.config import AssemblyOptions
from fabassemble.context import AssemblyContext

# =============================================================================
# File Fixtures
# =============================================================================

@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a UTF-8 file under tmp_path (parents created)."""
    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


# =============================================================================
# Site Fixtures
# =============================================================================

@pytest.fixture
def site_dir(tmp_path: Path, write_file: Callable[[str, str], Path]) -> Path:
    """
    Minimal site with the default layout.

    Contains:
    - src/materials/structures/01-page.html (order 1, title Home)
    - src/materials/structures/02-footer.html (order 2)
    - src/materials/components/buttons/primary.html (sub-collection member)
    - src/views/index.html, src/views/pages/01-about.html
    - src/views/layouts/default.html, src/views/layouts/includes/head.html
    - src/data/site.yml
    - src/docs/getting-started.md
    """
    write_file(
        "src/materials/structures/01-page.html",
        "---\norder: 1\ntitle: Home\n---\n<p>{{title}}</p>\n",
    )
    write_file(
        "src/materials/structures/02-footer.html",
        "---\norder: 2\nnotes: Site *footer*\n---\n<footer>{{site.owner}}</footer>\n",
    )
    write_file(
        "src/materials/components/buttons/primary.html",
        "---\nlabel: Go\n---\n<button class=\"btn\">{{label}}</button>\n",
    )
    write_file(
        "src/views/index.html",
        "---\ntitle: Index\n---\n<h1>{{title}}</h1>\n{{> page}}\n",
    )
    write_file(
        "src/views/pages/01-about.html",
        "---\ntitle: About\n---\n<a href=\"{{baseurl}}/index.html\">{{title}}</a>\n",
    )
    write_file(
        "src/views/layouts/default.html",
        "<html>{{> head}}<body>{% body %}</body></html>\n",
    )
    write_file("src/views/layouts/includes/head.html", "<head><title>{{site.name}}</title></head>")
    write_file("src/data/site.yml", "name: Toolkit\nowner: ACME\n")
    write_file("src/docs/getting-started.md", "# Getting started\n\nRun it.\n")
    return tmp_path


@pytest.fixture
def site_options(site_dir: Path) -> AssemblyOptions:
    """Options rooted at site_dir."""
    return AssemblyOptions(base_dir=site_dir, lock_timeout=1.0)


@pytest.fixture
def site_context(site_options: AssemblyOptions) -> AssemblyContext:
    """Fresh context for site_options."""
    return AssemblyContext.create(site_options)
