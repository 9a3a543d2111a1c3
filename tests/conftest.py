"""Pytest configuration and shared fixtures."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed catalog creation time."""
    return datetime(2026, 1, 26, 9, 30, tzinfo=timezone(timedelta(hours=2)))


@pytest.fixture
def sample_template_file(temp_dir: Path) -> Path:
    """Create a sample template with singular and plural markers."""
    filepath = temp_dir / "index.html"
    filepath.write_text('''<!doctype html>
<title>{{ _("Dashboard") }}</title>
{% for item in items %}
  <button>{{ _("Save") }}</button>
{% endfor %}
<p>{{ _plural("One file", "{n} files", count) }}</p>
<p>{{ _("Save") }}</p>
''')
    return filepath


@pytest.fixture
def sample_script_file(temp_dir: Path) -> Path:
    """Create a sample script with singular and plural markers."""
    filepath = temp_dir / "app.js"
    filepath.write_text('''import { render } from './render';

const title = gettext("Dashboard");

export const label = (n) => ngettext("One file", "{n} files", n);

function save() {
  render(gettext('Saved "draft"'));
}
''')
    return filepath
