"""Startup Preflight Check"""
import importlib.util
import shutil
from importlib import metadata

from rich.console import Console

from .config import AUDD_API_TOKEN, APP_VERSION, LYRICS_SERVICE_URL, RECORDER_BIN
from .lyrics_client import check_server

console = Console()


async def run_preflight(need_recorder: bool = True) -> bool:
    """
    Run startup checks. Print results. Return False if a required check fails.
    The lyrics service is optional: without it only AudD's embedded lyrics are used.
    """
    console.print(f"\n  [bold]🎶  Lyrical Glasses v{APP_VERSION}[/bold] — preflight check\n")

    checks = [
        ("Python deps", _check_python_deps, True),
        ("AudD token", _check_token, True),
        ("Recorder", _check_recorder, need_recorder),
        ("Lyrics service", _check_lyrics_service, False),
    ]

    results = []
    for i, (label, fn, required) in enumerate(checks, 1):
        ok, msg, fix = await fn()
        results.append((ok, required, label, msg, fix))
        if ok:
            icon = "[green]✓[/green]"
        elif required:
            icon = "[red]✗[/red]"
        else:
            icon = "[yellow]![/yellow]"
        dot_count = 30 - len(label)
        dots = "." * max(dot_count, 3)
        color = "green" if ok else ("red" if required else "yellow")
        console.print(f"  [{i}/{len(checks)}] {label} {dots} {icon} [{color}]{msg}[/{color}]")

    # Print fix instructions for any failures
    failures = [(label, fix, required) for ok, required, label, _, fix in results if not ok and fix]
    if failures:
        console.print("")
        for label, fix, required in failures:
            tone = "yellow" if required else "dim"
            console.print(f"  [{tone}]Fix for {label}:[/{tone}]")
            for line in fix.strip().splitlines():
                console.print(f"    {line}")
            console.print("")

    if any(not ok and required for ok, required, *_ in results):
        console.print("  Then re-run: [bold]python glasses.py listen[/bold]\n")
        return False

    console.print("")
    return True


# (import name, distribution name) for everything the listen flow and the service need
_REQUIRED_PACKAGES = [
    ("httpx", "httpx"),
    ("rich", "rich"),
    ("dotenv", "python-dotenv"),
    ("starlette", "starlette"),
    ("uvicorn", "uvicorn"),
    ("syncedlyrics", "syncedlyrics"),
]


async def _check_python_deps() -> tuple[bool, str, str]:
    missing = []
    versions = []
    for module, dist in _REQUIRED_PACKAGES:
        if importlib.util.find_spec(module) is None:
            missing.append(dist)
            continue
        try:
            versions.append(f"{dist} {metadata.version(dist)}")
        except metadata.PackageNotFoundError:
            versions.append(dist)

    if missing:
        return False, f"missing: {', '.join(missing)}", "Run: pip install -e ."
    return True, f"{len(versions)} packages ({versions[0]}, ...)", ""


async def _check_token() -> tuple[bool, str, str]:
    if AUDD_API_TOKEN.strip():
        return True, "configured", ""
    return False, "not set", (
        "Get a token at https://dashboard.audd.io and add it to .env:\n"
        "  AUDD_API_TOKEN=your-token"
    )


async def _check_recorder() -> tuple[bool, str, str]:
    path = shutil.which(RECORDER_BIN)
    if path:
        return True, path, ""
    return False, f"'{RECORDER_BIN}' not found", (
        "Install SoX (provides `rec`):\n"
        "  brew install sox        # macOS\n"
        "  sudo apt install sox    # Debian/Ubuntu\n"
        "Or pass a recording with --file"
    )


async def _check_lyrics_service() -> tuple[bool, str, str]:
    if await check_server(LYRICS_SERVICE_URL):
        return True, f"running at {LYRICS_SERVICE_URL.replace('http://', '')}", ""
    return False, "not responding", (
        "Start it in another terminal:\n"
        "  python glasses.py serve"
    )
