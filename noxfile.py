# noxfile.py
from nox_poetry import Session, session

PY_VERSIONS = ["3.11", "3.12"]
SOURCES = ("src", "tests", "noxfile.py")


@session(python=PY_VERSIONS[0])
def format(session: Session) -> None:
    """Auto-format code."""
    session.install("black", "isort")
    session.run("isort", *SOURCES)
    session.run("black", *SOURCES)


@session(python=PY_VERSIONS[0])
def typecheck_mypy(session: Session) -> None:
    session.install(".", "mypy", "pytest", "pandas-stubs~=2.2")
    session.run("mypy", "--config-file", "pyproject.toml")


@session(python=PY_VERSIONS[0])
def lint(session: Session) -> None:
    session.install("ruff", "black", "isort")
    session.run("ruff", "check", *SOURCES)
    session.run("isort", "--check-only", *SOURCES)
    session.run("black", "--check", *SOURCES)


@session(python=PY_VERSIONS)
def tests(session: Session) -> None:
    """Run the test suite against the installed package (no network needed)."""
    session.install(".", "pytest")
    session.run("pytest", *session.posargs)


@session(python=PY_VERSIONS[0])
def examples(session: Session) -> None:
    """Run every scenario in src/example.py; charts land in outputs/."""
    session.install(".")
    session.env["MPLBACKEND"] = "Agg"
    for option in ("1", "2", "3"):
        session.run("python", "src/example.py", "--option", option)
