"""
Tests that every declared runtime dependency is imported somewhere.
"""

import re
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

IMPORT_NAMES = {
    'flask': 'flask',
    'flask-sqlalchemy': 'flask_sqlalchemy',
    'sqlalchemy': 'sqlalchemy',
    'flask-cors': 'flask_cors',
    'python-dotenv': 'dotenv',
    'requests': 'requests',
    'pyjwt': 'jwt',
    'redis': 'redis',
    'alembic': 'alembic',
}


def _dependencies():
    with open(ROOT / 'pyproject.toml', 'rb') as f:
        project = tomllib.load(f)['project']
    return [re.split(r'[<>=!~\[ ]', spec, 1)[0].lower() for spec in project['dependencies']]


def _source():
    files = list((ROOT / 'pitchside').rglob('*.py'))
    files += [ROOT / 'init_db.py', ROOT / 'migrations' / 'env.py']
    return '\n'.join(path.read_text(encoding='utf-8') for path in files)


class TestDependencies:
    """Tests for the runtime dependency list in pyproject.toml"""

    def test_every_dependency_has_a_known_import_name(self):
        assert set(_dependencies()) <= set(IMPORT_NAMES)

    def test_every_dependency_is_imported(self):
        source = _source()

        unused = [
            name for name in _dependencies()
            if not re.search(rf'^\s*(from|import) {IMPORT_NAMES[name]}\b', source, re.MULTILINE)
        ]

        assert unused == []
