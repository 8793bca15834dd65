"""
Loading and splitting of SQL migration files.

The splitter is deliberately naive: it cuts on every ``;``. Files that
define functions with ``$$`` bodies containing semicolons must be applied
from the dashboard SQL editor instead.
"""

from dataclasses import dataclass, field
from pathlib import Path


def split_sql_statements(sql: str) -> list[str]:
    """
    Split SQL text into individual statements.

    Chunks are stripped; empty chunks and chunks that start with ``--``
    are dropped. Returned statements carry no trailing ``;``.
    """
    statements = []
    for chunk in sql.split(";"):
        statement = chunk.strip()
        if not statement or statement.startswith("--"):
            continue
        statements.append(statement)
    return statements


def preview(statement: str, width: int = 100) -> str:
    """First ``width`` characters of a statement, with an ellipsis when cut."""
    if len(statement) <= width:
        return statement
    return statement[:width] + "..."


@dataclass
class SqlScript:
    path: Path
    text: str
    statements: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path.name


def load_sql_file(path: str | Path) -> SqlScript:
    """Read a migration file and split it into statements."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return SqlScript(path=path, text=text, statements=split_sql_statements(text))
