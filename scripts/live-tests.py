#!/usr/bin/env python3
# This project was developed with assistance from AI tools.
"""Live test suite for the credit workflow API.

Walks a fresh application through intake, analysis, supervision and the
committee decision against a running server, then checks the public status
page, the audit chain and RFC 7807 error bodies.

Prerequisites:
  - API server running on localhost:8000 with AUTH_DISABLED=true
    (every request acts as the dev admin)
  - PostgreSQL migrated and S3-compatible storage reachable

Usage:
  ./scripts/live-tests.py                    # full suite
  ./scripts/live-tests.py --base-url URL     # another server
"""

import argparse
import asyncio
import sys
import time

import httpx

BASE = "http://localhost:8000"

# ---------------------------------------------------------------------------
# Test runner
# ---------------------------------------------------------------------------

PASS = 0
FAIL = 0
ERRORS: list[str] = []
SECTION = ""


def section(name: str):
    global SECTION
    SECTION = name
    print(f"\n{'=' * 60}")
    print(f"  {name}")
    print(f"{'=' * 60}\n")


def ok(name: str, passed: bool, detail: str = ""):
    global PASS, FAIL
    if passed:
        PASS += 1
        print(f"  PASS  {name}")
    else:
        FAIL += 1
        msg = f"[{SECTION}] {name}: {detail}" if detail else f"[{SECTION}] {name}"
        ERRORS.append(msg)
        print(f"  FAIL  {name} -- {detail}")


def has_keys(d: dict, *keys: str) -> bool:
    return all(k in d for k in keys)


REQUIRED_DOCS = [
    "national_id",
    "agreement_form",
    "application_form",
    "credit_profile",
    "transaction_profile",
    "collateral_profile",
    "financial_profile",
    "major_line_business",
]


# ---------------------------------------------------------------------------
# 1. Health and public endpoints
# ---------------------------------------------------------------------------

async def test_health(c: httpx.AsyncClient):
    section("Health")

    r = await c.get("/health/")
    ok("GET /health/ returns 200", r.status_code == 200)
    data = r.json()
    ok("contains API service", any(s.get("name") == "API" for s in data))
    ok("database is healthy",
       any(s.get("name") == "Database" and s.get("status") == "healthy" for s in data))

    r = await c.get("/")
    ok("GET / root returns 200", r.status_code == 200)


async def test_public_api(c: httpx.AsyncClient):
    section("Public API (no auth required)")

    r = await c.get("/api/public/catalog")
    ok("GET /api/public/catalog returns 200", r.status_code == 200)
    ok("catalog lists loan types", bool(r.json().get("loan_types")))

    r = await c.get("/api/public/status/NOT-A-REFERENCE")
    ok("malformed reference returns 422", r.status_code == 422)

    r = await c.get("/api/public/status/DASHEN-190001-0000")
    ok("unknown reference returns 404", r.status_code == 404)

    r = await c.get("/api/profile")
    ok("GET /api/profile returns 200", r.status_code == 200)
    ok("dev user is admin", r.json().get("role") == "admin", f"role={r.json().get('role')}")


# ---------------------------------------------------------------------------
# 2. Intake
# ---------------------------------------------------------------------------

async def test_intake(c: httpx.AsyncClient) -> dict:
    """Returns dict with created app id and reference for downstream tests."""
    section("Intake (draft uploads -> create)")
    ctx: dict = {}

    documents = []
    for doc_type in REQUIRED_DOCS:
        r = await c.post("/api/documents/upload-url", json={
            "doc_type": doc_type,
            "file_name": f"{doc_type}.pdf",
            "content_type": "application/pdf",
        })
        if r.status_code != 200:
            ok(f"upload URL for {doc_type}", False, f"status={r.status_code} {r.text[:120]}")
            return ctx
        body = r.json()
        # The browser would PUT the file here; intake only checks key ownership.
        documents.append({"doc_type": doc_type, "object_key": body["object_key"]})
    ok("issued draft upload URLs", len(documents) == len(REQUIRED_DOCS))
    ok("draft keys live in the caller's area",
       all(d["object_key"].startswith("drafts/") for d in documents))

    customer = f"LIVE-{int(time.time())}"
    r = await c.post("/api/applications/check-entity", json={"number": customer, "type": "customer"})
    ok("check-entity returns 200", r.status_code == 200)
    ok("new customer does not exist yet", r.json().get("exists") is False)

    payload = {
        "basic_info": {
            "customer_number": customer,
            "first_name": "Almaz",
            "last_name": "Tadesse",
            "phone": "+251911223344",
        },
        "business_info": {
            "major_line_business": "Coffee export",
            "date_of_establishment_mlb": "2015-03-01",
        },
        "loan_details": {"loan_type": "Term loan", "loan_amount": "500000", "loan_period": 36},
        "documents": documents,
    }
    r = await c.post("/api/applications/", json=payload)
    ok("POST /api/applications/ returns 201", r.status_code == 201, r.text[:200])
    if r.status_code != 201:
        return ctx
    app = r.json()
    ok("starts PENDING", app.get("application_status") == "PENDING")
    ok("has reference number", app.get("application_reference_number", "").startswith("DASHEN-"))
    ctx["id"] = app["id"]
    ctx["reference"] = app["application_reference_number"]

    r = await c.post("/api/applications/", json=payload)
    ok("duplicate customer returns 409", r.status_code == 409, f"status={r.status_code}")

    r = await c.get(f"/api/applications/by-reference/{ctx['reference']}")
    ok("lookup by reference returns 200", r.status_code == 200)

    r = await c.get(f"/api/applications/{ctx['id']}/documents")
    ok("documents listed", r.status_code == 200 and
       r.json()["pagination"]["total"] == len(REQUIRED_DOCS))
    return ctx


# ---------------------------------------------------------------------------
# 3. Workflow
# ---------------------------------------------------------------------------

async def test_workflow(c: httpx.AsyncClient, app_id: int, reference: str):
    section("Workflow (guarded transitions)")
    base = f"/api/applications/{app_id}"

    steps = [
        ("take", None, "UNDER_REVIEW"),
        ("request-recommendation", {"comment": "Please confirm collateral value"},
         "RM_RECCOMENDATION"),
        ("answer", {"recommendation": "Collateral revalued last month"}, "UNDER_REVIEW"),
        ("complete-analysis", {"conditional": True}, "CONDITIONAL"),
        ("take-supervision", {"expected_status": "CONDITIONAL"}, "SUPERVISOR_REVIEWING"),
        ("complete-supervision", {"risk_score": 70, "overall_score": 68}, "SUPERVISED"),
        ("escalate", None, "COMMITTE_REVIEW"),
    ]
    for path, body, expected in steps:
        r = await c.post(f"{base}/{path}", json=body)
        ok(f"{path} -> {expected}",
           r.status_code == 200 and r.json().get("application_status") == expected,
           f"status={r.status_code} {r.text[:160]}")

    r = await c.post(f"{base}/take")
    ok("stale take returns 409", r.status_code == 409, f"status={r.status_code}")
    ok("conflict names current status", "COMMITTE_REVIEW" in r.json().get("detail", ""))

    r = await c.put(f"/api/analysis/{reference}", json={
        "analyst_conclusion": "Viable with collateral top-up",
    })
    ok("analysis saved", r.status_code == 200, f"status={r.status_code}")

    r = await c.post(f"{base}/committee-decision", json={
        "decision": "APPROVED",
        "decision_reason": "Meets lending policy",
    })
    ok("committee decision created (201)", r.status_code == 201, r.text[:200])
    ok("application approved", r.json().get("application_status") == "APPROVED")

    r = await c.post(f"{base}/committee-decision", json={
        "decision": "APPROVED",
        "decision_reason": "Meets lending policy after collateral top-up",
    })
    ok("re-posted decision updates the record (200)", r.status_code == 200, r.text[:200])

    r = await c.put(f"/api/analysis/{reference}", json={"analyst_conclusion": "late edit"})
    ok("analysis locked after decision (409)", r.status_code == 409, f"status={r.status_code}")

    r = await c.get(f"/api/decisions/{reference}")
    ok("decision readable", r.status_code == 200 and r.json().get("decision") == "APPROVED")

    r = await c.get(f"/api/public/status/{reference}")
    ok("public status shows APPROVED", r.json().get("status") == "APPROVED")
    ok("public status shows decision", r.json().get("decision") == "APPROVED")


# ---------------------------------------------------------------------------
# 4. Admin
# ---------------------------------------------------------------------------

async def test_admin(c: httpx.AsyncClient, app_id: int):
    section("Admin (audit trail)")

    r = await c.get(f"/api/admin/audit/application/{app_id}")
    ok("audit trail returns 200", r.status_code == 200)
    events = r.json().get("events", [])
    ok("audit trail records the transitions",
       sum(e.get("event_type") == "status_transition" for e in events) >= 8,
       f"events={len(events)}")

    r = await c.get("/api/admin/audit/verify")
    ok("audit chain intact", r.status_code == 200 and r.json().get("status") == "OK",
       r.text[:200])

    r = await c.patch(f"/api/applications/{app_id}/status", json={
        "expected_status": "PENDING",
        "new_status": "REJECTED",
        "reason": "stale override",
    })
    ok("stale override returns 409", r.status_code == 409, f"status={r.status_code}")


# ---------------------------------------------------------------------------
# 5. Error handling
# ---------------------------------------------------------------------------

async def test_error_handling(c: httpx.AsyncClient):
    section("Error Handling (RFC 7807)")

    r = await c.get("/api/applications/99999999")
    ok("404 status code", r.status_code == 404)
    body = r.json()
    ok("404 is a problem document", has_keys(body, "type", "title", "status", "detail"))

    r = await c.post("/api/applications/", json={"basic_info": {}})
    ok("422 status code", r.status_code == 422)
    ok("422 has status=422", r.json().get("status") == 422)

    r = await c.get("/api/applications/?status=NOT_A_STATUS")
    ok("unknown status filter returns 422", r.status_code == 422)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

async def main():
    parser = argparse.ArgumentParser(description="Live test suite for the credit workflow API")
    parser.add_argument("--base-url", default=BASE, help="Server to test")
    args = parser.parse_args()

    print("=" * 60)
    print("  LIVE TEST SUITE -- Credit Workflow API")
    print("=" * 60)

    async with httpx.AsyncClient(base_url=args.base_url, timeout=15) as c:

        # Pre-flight: make sure server is up
        try:
            r = await c.get("/health/")
            if r.status_code != 200:
                print(f"\n  Server returned {r.status_code} on /health/ -- is it running?")
                sys.exit(2)
        except httpx.ConnectError:
            print(f"\n  Cannot connect to server at {args.base_url} -- is it running?")
            sys.exit(2)

        await test_health(c)
        await test_public_api(c)
        ctx = await test_intake(c)
        if ctx:
            await test_workflow(c, ctx["id"], ctx["reference"])
            await test_admin(c, ctx["id"])
        await test_error_handling(c)

    # Summary
    print(f"\n{'=' * 60}")
    print(f"  RESULTS: {PASS} passed, {FAIL} failed")
    print(f"{'=' * 60}")

    if ERRORS:
        print("\nFailures:")
        for e in ERRORS:
            print(f"  - {e}")

    sys.exit(0 if FAIL == 0 else 1)


if __name__ == "__main__":
    asyncio.run(main())
