from __future__ import annotations
import argparse, json, sys
from pathlib import Path

from coach.engine import Engine
from coach.errors import AuthenticationRequired, CoachError
from coach.export import render_pdf, render_text
from coach.models import AuthContext
from coach.records import as_dict
from coach.upstream import parse_grammar_result
from coach_ui.serialize import runs_json


def _read(value: str | None, path: str | None) -> str | None:
    if path:
        return Path(path).read_text(encoding="utf-8")
    return value


def _mark(runs, left: str, right: str) -> str:
    return "".join(f"{left}{r.text}{right}" if r.tagged else r.text for r in runs)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="English coach CLI (Engine-backed)")
    p.add_argument("--remote-db", default=None, help='Remote store DSN ("sqlite:///path" or "memory://")')
    p.add_argument("--local-db", default=None, help='Local store DSN ("json:///path" or "memory://")')
    p.add_argument("--user", default=None, help="Authenticated user id (omit for anonymous)")
    p.add_argument("--json", action="store_true", help="Emit JSON")
    p.add_argument("--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Highlight a grammar result against its text")
    r.add_argument("--text", default=None)
    r.add_argument("--text-file", default=None)
    r.add_argument("--result-file", required=True, help="Model output (JSON, fences allowed)")

    sub.add_parser("history", help="List saved sessions")

    d = sub.add_parser("delete", help="Delete a saved session")
    d.add_argument("id")

    s = sub.add_parser("save", help="Save a session")
    s.add_argument("--text", required=True)
    s.add_argument("--grammar", default=None)
    s.add_argument("--professional", default=None)
    s.add_argument("--casual", default=None)
    s.add_argument("--local", action="store_true", help="Save to the local fallback store")

    rep = sub.add_parser("report", help="Build a report for a saved session")
    rep.add_argument("id")
    rep.add_argument("--out", default=None, help="Write PDF (.pdf) or text to this path")

    args = p.parse_args(argv)
    auth = AuthContext(user_id=args.user) if args.user else AuthContext.anonymous()

    eng = Engine().open(remote_dsn=args.remote_db, local_dsn=args.local_db, verbose=args.verbose)
    try:
        if args.cmd == "render":
            text = _read(args.text, args.text_file)
            if not text:
                p.error("render requires --text or --text-file")
            result = parse_grammar_result(Path(args.result_file).read_text(encoding="utf-8"))
            original, corrected = eng.render(text, result)
            if args.json:
                print(json.dumps({"original": runs_json(original), "corrected": runs_json(corrected)},
                                 ensure_ascii=False, indent=2))
            else:
                print("Original : " + _mark(original, "[", "]"))
                print("Corrected: " + _mark(corrected, "{", "}"))

        elif args.cmd == "history":
            rows = eng.history(auth)
            if args.json:
                print(json.dumps([as_dict(x) for x in rows], ensure_ascii=False, indent=2))
            elif not rows:
                print("(no sessions)")
            else:
                for x in rows:
                    print(f"{x.id:<38} {x.provenance.value:<7} {x.created_at:<25} {x.original_text[:60]}")

        elif args.cmd == "delete":
            eng.delete(args.id, auth)

        elif args.cmd == "save":
            rec = eng.save(auth, args.text, args.grammar, args.professional, args.casual, local=args.local)
            print(json.dumps(as_dict(rec), ensure_ascii=False) if args.json else rec.id)

        elif args.cmd == "report":
            doc = eng.report_for(args.id, auth)
            if args.out and args.out.lower().endswith(".pdf"):
                Path(args.out).write_bytes(render_pdf(doc))
            elif args.out:
                Path(args.out).write_text(render_text(doc), encoding="utf-8")
            else:
                sys.stdout.write(render_text(doc))

        return 0
    except AuthenticationRequired:
        print("Please log in (--user) to save your sessions to the cloud.", file=sys.stderr)
        return 2
    except KeyError as e:
        print(f"unknown session: {e.args[0]}", file=sys.stderr)
        return 1
    except CoachError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        eng.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
