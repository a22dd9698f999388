from __future__ import annotations

from pathlib import Path
import sys
import tempfile

from fastapi.testclient import TestClient

PROJECT_DIR = Path(__file__).resolve().parents[1]
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from app import app  # noqa: E402
from workshop_forms.api.routes import get_sink  # noqa: E402
from workshop_forms.sinks import LocalDirectorySink  # noqa: E402


def fail(message: str) -> None:
    print(f"SMOKE_FAIL: {message}")
    raise SystemExit(1)


def main() -> None:
    output_dir = Path(tempfile.mkdtemp(prefix="workshop-smoke-"))
    app.dependency_overrides[get_sink] = lambda: LocalDirectorySink(output_dir)
    client = TestClient(app)

    listing = client.get("/workshops")
    if listing.status_code != 200 or not listing.json()["workshops"]:
        fail("no workshops listed")

    slug = listing.json()["workshops"][0]["slug"]
    opened = client.post("/sessions", json={"workshop_slug": slug, "user_name": "Smoke Test"})
    if opened.status_code != 200:
        fail(f"could not open session ({opened.status_code})")

    session = opened.json()["session"]
    if not session["fields"]:
        fail(f"workshop {slug} declares no fields")

    for field in session["fields"]:
        response = client.put(
            f"/sessions/{session['id']}/fields/{field['name']}",
            json={"value": f"smoke answer for {field['name']}"},
        )
        if response.status_code != 200:
            fail(f"field update failed for {field['name']}")

    submitted = client.post(f"/sessions/{session['id']}/submit")
    if submitted.status_code != 200:
        fail(f"submit failed ({submitted.status_code}): {submitted.text}")

    written = output_dir / submitted.json()["file_path"]
    if not written.is_file():
        fail("response file was not written")
    if "smoke answer" not in written.read_text(encoding="utf-8"):
        fail("response file is missing answers")

    print("SMOKE_OK")


if __name__ == "__main__":
    main()
