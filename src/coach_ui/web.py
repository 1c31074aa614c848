from __future__ import annotations
import argparse
import logging
from flask import Flask, request, jsonify, Response

from coach.engine import Engine
from coach.errors import AuthenticationRequired, MalformedUpstreamResult, RemoteStoreError
from coach.export import render_pdf, render_text, report_filename
from coach.records import as_dict
from coach_ui.serialize import auth_from_headers, document_json, grammar_from, runs_json

app = Flask(__name__)
_engine: Engine | None = None
log = logging.getLogger(__name__)


def _eng() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized")
    return _engine


# ---------- errors ----------
@app.errorhandler(MalformedUpstreamResult)
def _malformed(e: MalformedUpstreamResult):
    return jsonify({"error": f"Failed to parse analysis result: {e}"}), 502


@app.errorhandler(AuthenticationRequired)
def _auth_required(e: AuthenticationRequired):
    return jsonify({"error": str(e), "requireAuth": True}), 401


@app.errorhandler(RemoteStoreError)
def _remote_failed(e: RemoteStoreError):
    log.error("remote store error: %s", e)
    return jsonify({"error": f"Error saving to cloud: {e}"}), 502


# ---------- API ----------
@app.get("/api/health")
def api_health():
    return jsonify({"ok": _engine is not None})


@app.post("/api/render")
def api_render():
    body = request.get_json(silent=True) or {}
    text = body.get("text")
    if not text or "result" not in body:
        return jsonify({"error": "text and result are required"}), 400
    original, corrected = _eng().render(text, body["result"])
    return jsonify({"original": runs_json(original), "corrected": runs_json(corrected)})


@app.get("/api/history")
def api_history():
    rows = _eng().history(auth_from_headers(request.headers))
    return jsonify([as_dict(r) for r in rows])


@app.post("/api/history")
def api_save():
    body = request.get_json(silent=True) or {}
    text = body.get("originalText")
    if not text:
        return jsonify({"error": "No text provided"}), 400
    rec = _eng().save(
        auth_from_headers(request.headers),
        text,
        body.get("grammarVersion"),
        body.get("professionalVersion"),
        body.get("casualVersion"),
        local=bool(body.get("local")),
    )
    return jsonify(as_dict(rec)), 201


@app.delete("/api/history/<record_id>")
def api_delete(record_id: str):
    _eng().delete(record_id, auth_from_headers(request.headers))
    return Response(status=204)


def _send_report(doc):
    fmt = request.args.get("format", "json", type=str)
    if fmt == "pdf":
        return Response(
            render_pdf(doc), mimetype="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{report_filename(doc)}"'},
        )
    if fmt == "text":
        return Response(render_text(doc), mimetype="text/plain")
    return jsonify(document_json(doc))


@app.post("/api/report")
def api_report():
    body = request.get_json(silent=True) or {}
    text = body.get("originalText")
    if not text:
        return jsonify({"error": "No text provided"}), 400
    doc = _eng().report(
        text,
        grammar_from(body),
        body.get("professionalText"),
        body.get("casualText"),
        date=body.get("date"),
    )
    return _send_report(doc)


@app.get("/api/history/<record_id>/report")
def api_history_report(record_id: str):
    try:
        doc = _eng().report_for(record_id, auth_from_headers(request.headers))
    except KeyError:
        return jsonify({"error": "unknown session"}), 404
    return _send_report(doc)


# ---------- UI ----------
@app.get("/")
def home():
    # One page: paste text + model output, see highlights; history below.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>English Coach</title>
<style>
:root{ --bg:#0b0f14; --panel:#0f141b; --ink:#cfd8e3; --muted:#8a94a6; --border:#1c2530; --bad:#ff6b6b; --ok:#45d483; }
*{box-sizing:border-box}
body{ margin:0; background:var(--bg); color:var(--ink); font:16px/1.5 system-ui,-apple-system,Segoe UI,Roboto,Arial; }
.container{ max-width:980px; margin:24px auto; padding:0 16px; }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:16px; padding:18px; margin-bottom:16px; }
textarea{ width:100%; min-height:90px; background:#0b1117; color:var(--ink); border:1px solid var(--border); border-radius:10px; padding:10px; }
.btn{ padding:8px 14px; border-radius:10px; border:1px solid var(--border); background:#0b1117; color:var(--ink); cursor:pointer; }
.grid{ display:grid; grid-template-columns:1fr 1fr; gap:16px; }
.bad{ color:var(--bad); text-decoration:underline wavy; }
.ok{ color:var(--ok); text-decoration:underline wavy; }
.muted{ color:var(--muted); font-size:13px; }
.row{ display:flex; justify-content:space-between; gap:12px; padding:10px 0; border-top:1px solid var(--border); }
</style>
</head>
<body>
<div class="container">
  <div class="card">
    <h1>English Coach</h1>
    <textarea id="text" placeholder="Your text"></textarea>
    <textarea id="result" placeholder='Grammar result JSON: {"correctedText": "...", "mistakes": [...]}'></textarea>
    <button id="go" class="btn">Highlight</button>
    <div id="err" class="muted"></div>
    <div class="grid">
      <div><h3>Original Text</h3><p id="orig"></p></div>
      <div><h3>Corrected Version</h3><p id="corr"></p></div>
    </div>
  </div>
  <div class="card">
    <h2>Learning Journey</h2>
    <div id="hist" class="muted">No sessions yet.</div>
  </div>
</div>
<script>
const $ = (s) => document.querySelector(s);
function esc(s){ const d=document.createElement("div"); d.textContent=s; return d.innerHTML; }
function paint(runs, cls){
  return runs.map(r => r.tagged ? `<span class="${cls}" title="${esc(r.edit.explanation||"")}">${esc(r.text)}</span>` : esc(r.text)).join("");
}
async function highlight(){
  $("#err").textContent = "";
  let result;
  try{ result = JSON.parse($("#result").value); }catch(e){ result = $("#result").value; }
  const resp = await fetch("/api/render", {method:"POST", headers:{"Content-Type":"application/json"},
    body: JSON.stringify({text: $("#text").value, result})});
  const data = await resp.json();
  if(!resp.ok){ $("#err").textContent = data.error || `HTTP ${resp.status}`; return; }
  $("#orig").innerHTML = paint(data.original, "bad");
  $("#corr").innerHTML = paint(data.corrected, "ok");
}
async function loadHistory(){
  const data = await (await fetch("/api/history")).json();
  if(!data.length){ $("#hist").textContent = "No sessions yet."; return; }
  $("#hist").innerHTML = data.map(r => `
    <div class="row"><div><div class="muted">${esc(r.date)}</div>&quot;${esc(r.originalText)}&quot;</div>
    <div><a class="btn" href="/api/history/${encodeURIComponent(r.id)}/report?format=pdf">PDF</a>
    <button class="btn" data-id="${esc(r.id)}">Delete</button></div></div>`).join("");
  document.querySelectorAll("#hist button[data-id]").forEach(b => b.addEventListener("click", async () => {
    await fetch(`/api/history/${encodeURIComponent(b.dataset.id)}`, {method:"DELETE"});
    loadHistory();
  }));
}
$("#go").addEventListener("click", highlight);
loadHistory();
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run Flask UI on top of Engine")
    ap.add_argument("--remote-db", dest="remote_db", default=None)  # "sqlite:///path" or "memory://"
    ap.add_argument("--local-db", dest="local_db", default=None)    # "json:///path" or "memory://"
    ap.add_argument("--local-key", default=None)
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _engine
    _engine = Engine().open(
        remote_dsn=args.remote_db, local_dsn=args.local_db,
        local_key=args.local_key, verbose=args.verbose,
    )
    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
