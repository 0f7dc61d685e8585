def main(argv: list[str] | None = None) -> int:
    # 遅延 import: python -m combatlog.cli で __main__ が二重に読まれないように
    from .__main__ import main as _main

    return _main(argv)


__all__ = ["main"]
