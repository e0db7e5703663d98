"""CLI interface with subcommand routing."""

import argparse
import asyncio
import logging
import os
import shutil
import sys

from meditation_guide.affirmations import get_affirmations
from meditation_guide.constants import DEFAULT_SCRIPT, GUIDE_VOICE, OUTPUT_DIR, VERSION
from meditation_guide.greetings import GREETINGS, get_combined_script, get_random_line
from meditation_guide.models import SessionStatus
from meditation_guide.narrator import NarratorError, SpeakerNarrator, check_player
from meditation_guide.render import render_script
from meditation_guide.scripts import SCRIPT_DATA, ScriptStore, build_script, load_scripts
from meditation_guide.session import NarrationError, SessionController


def _check_ffmpeg():
    """Verify ffmpeg is installed."""
    if not shutil.which("ffmpeg"):
        print("Error: ffmpeg is required but not found.", file=sys.stderr)
        print("Install with: brew install ffmpeg", file=sys.stderr)
        raise SystemExit(1)


def _load_store(scripts_path: str | None) -> ScriptStore:
    """Built-in scripts, overlaid with any from a user scripts file."""
    scripts = {name: build_script(entry) for name, entry in SCRIPT_DATA.items()}
    if scripts_path:
        if not os.path.exists(scripts_path):
            print(f"Error: File not found: {scripts_path}", file=sys.stderr)
            raise SystemExit(1)
        scripts.update(load_scripts(scripts_path))
    return ScriptStore(scripts)


def _get_script(store: ScriptStore, name: str):
    script = store.get_script(name)
    if script is None:
        print(f"Error: Unknown meditation '{name}'.", file=sys.stderr)
        print(f"Available: {', '.join(store.list_scripts())}", file=sys.stderr)
        raise SystemExit(1)
    return script


def cmd_list(args):
    """List available meditations."""
    store = _load_store(args.scripts)
    names = store.list_scripts()
    if not names:
        print("No meditations found.")
        return
    print("Meditations:")
    for name in names:
        script = store.get_script(name)
        print(f"  {name:<20} {script.title}")


def cmd_show(args):
    """Print a meditation's lines and pauses."""
    store = _load_store(args.scripts)
    script = _get_script(store, args.name)

    print(script.title)
    for key in ("duration", "healing_intention"):
        if script.metadata.get(key):
            print(f"  {key.replace('_', ' ').capitalize()}: {script.metadata[key]}")
    print(f"Lines: {len(script.segments)} ({script.spoken_pause_ms / 1000:.0f}s of silence)")
    for i, seg in enumerate(script.segments):
        print(f"  {i + 1:>3}. {seg.text}  [{seg.pause_ms} ms]")


def handle_command(controller: SessionController, line: str) -> None:
    """Apply one p/r/s command typed during playback."""
    command = line.strip().lower()
    if command == "p":
        controller.pause()
        if controller.status is SessionStatus.PAUSED:
            print("  (paused — 'r' to resume)")
    elif command == "r":
        controller.resume()
    elif command == "s":
        controller.stop()


def _watch_commands(controller: SessionController):
    """Route p/r/s lines on stdin to the controller. Returns an unsubscribe."""
    loop = asyncio.get_running_loop()
    fd = sys.stdin.fileno()

    def on_input():
        line = sys.stdin.readline()
        if not line:
            loop.remove_reader(fd)
            return
        handle_command(controller, line)

    loop.add_reader(fd, on_input)
    return lambda: loop.remove_reader(fd)


async def _play(controller: SessionController, name: str, interactive: bool):
    if controller.start(name) is None:
        return None
    unwatch = None
    if interactive:
        print("Commands: p = pause, r = resume, s = stop (then Enter)")
        unwatch = _watch_commands(controller)
    try:
        return await controller.wait()
    finally:
        if unwatch:
            unwatch()
        controller.stop()


def cmd_play(args):
    """Play a meditation aloud."""
    store = _load_store(args.scripts)
    script = _get_script(store, args.name)

    try:
        check_player()
    except NarratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    total = len(script.segments)

    def show_line(index, segment):
        print(f"  [{index + 1}/{total}] {segment.text}")

    narrator = SpeakerNarrator(voice=args.voice)
    controller = SessionController(narrator, store=store, on_segment=show_line)

    print(f"Playing: {script.title}")
    try:
        session = asyncio.run(_play(controller, args.name, sys.stdin.isatty()))
    except NarrationError as e:
        print(f"Error: {e} ({e.__cause__})", file=sys.stderr)
        raise SystemExit(1)
    except KeyboardInterrupt:
        print("\nStopped.")
        return

    if session is not None:
        print(f"Session {session.status.value}.")


def cmd_render(args):
    """Render a meditation to MP3."""
    _check_ffmpeg()
    store = _load_store(args.scripts)
    script = _get_script(store, args.name)

    output_path = args.output or os.path.join(OUTPUT_DIR, f"{args.name}.mp3")
    print(f"Rendering {len(script.segments)} lines of '{script.title}'...")
    path = render_script(script, output_path, voice=args.voice, drone=not args.no_drone)
    print(f"Done: {path}")


def cmd_affirmations(args):
    """Print affirmations for a constitution."""
    affirmations = get_affirmations(args.constitution)
    if not affirmations:
        print(f"No affirmations for '{args.constitution}'.")
        return
    print(f"Your {args.constitution} affirmations:")
    for line in affirmations:
        print(f'  "{line}"')


def cmd_greet(args):
    """Print a greeting script."""
    if args.category not in GREETINGS:
        print(f"Error: Unknown greeting category: {args.category}", file=sys.stderr)
        print(f"Valid categories: {', '.join(GREETINGS)}", file=sys.stderr)
        raise SystemExit(1)
    if args.random:
        print(get_random_line(args.category))
    else:
        print(get_combined_script(args.category, args.part or ()))


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="guide",
        description="Meditation Guide — guided meditations spoken by your AI guide",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_scripts_option(p):
        p.add_argument("--scripts", help="JSON file with additional meditation scripts")

    # list
    list_parser = subparsers.add_parser("list", help="List available meditations")
    add_scripts_option(list_parser)
    list_parser.set_defaults(func=cmd_list)

    # show
    show_parser = subparsers.add_parser("show", help="Show a meditation's lines")
    show_parser.add_argument("name", nargs="?", default=DEFAULT_SCRIPT, help="Meditation name")
    add_scripts_option(show_parser)
    show_parser.set_defaults(func=cmd_show)

    # play
    play_parser = subparsers.add_parser("play", help="Play a meditation aloud")
    play_parser.add_argument("name", nargs="?", default=DEFAULT_SCRIPT, help="Meditation name")
    play_parser.add_argument("--voice", default=GUIDE_VOICE, help="edge-tts voice")
    add_scripts_option(play_parser)
    play_parser.set_defaults(func=cmd_play)

    # render
    render_parser = subparsers.add_parser("render", help="Render a meditation to MP3")
    render_parser.add_argument("name", nargs="?", default=DEFAULT_SCRIPT, help="Meditation name")
    render_parser.add_argument("-o", "--output", help="Output MP3 path")
    render_parser.add_argument("--voice", default=GUIDE_VOICE, help="edge-tts voice")
    render_parser.add_argument("--no-drone", action="store_true", help="Render without the drone bed")
    add_scripts_option(render_parser)
    render_parser.set_defaults(func=cmd_render)

    # affirmations
    aff_parser = subparsers.add_parser("affirmations", help="Affirmations for a constitution")
    aff_parser.add_argument("constitution", help='Constitution label, e.g. "Vata-Pitta"')
    aff_parser.set_defaults(func=cmd_affirmations)

    # greet
    greet_parser = subparsers.add_parser("greet", help="Print a greeting script")
    greet_parser.add_argument("category", help="Greeting category")
    greet_parser.add_argument("--part", action="append", help="Only this part (repeatable)")
    greet_parser.add_argument("--random", action="store_true", help="One random line")
    greet_parser.set_defaults(func=cmd_greet)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    args.func(args)
