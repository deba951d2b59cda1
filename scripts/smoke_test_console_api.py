#!/usr/bin/env python3
"""
Smoke test for the migration console proxy against a running server.

Start the API first (in another terminal):
  uvicorn migration_console.api.main:app --host 127.0.0.1 --port 8000

Then run this script:
  python scripts/smoke_test_console_api.py --policy-number S6-10023
  python scripts/smoke_test_console_api.py --date 2024-04-01 --download --out-dir /tmp/docs
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict

import requests

from migration_console.integrations.policy.document_download import filename_from_disposition


def get_json(url: str, params: Dict[str, Any], timeout: int = 60) -> Dict[str, Any]:
    r = requests.get(url, params=params, timeout=timeout)
    body = r.json()
    if r.status_code >= 400:
        raise requests.HTTPError(f"{r.status_code}: {body.get('error')}", response=r)
    return body


def main() -> int:
    parser = argparse.ArgumentParser(description="Smoke test the Catalyst policy/document proxy")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--date", help="Effective date for policy search (YYYY-MM-DD)")
    parser.add_argument("--policy-number", help="Policy number for documents and detail")
    parser.add_argument("--download", action="store_true", help="Download the first document found")
    parser.add_argument("--out-dir", default=".", help="Where downloaded documents are written")
    args = parser.parse_args()
    base = args.base_url.rstrip("/")

    print("=== Migration console proxy smoke test ===\n")
    print(f"Base URL: {base}\n")

    print("1) GET /health")
    try:
        r = requests.get(f"{base}/health", timeout=10)
        r.raise_for_status()
        print(f"   status: {r.json().get('status')}\n")
    except requests.RequestException as e:
        print(f"   FAIL: {e}")
        if "Connection refused" in str(e) or "Failed to establish" in str(e):
            print("   -> Start the API first: uvicorn migration_console.api.main:app --host 127.0.0.1 --port 8000")
        return 1

    policy_number = args.policy_number
    if args.date:
        print(f"2) GET /api/policies/search?date={args.date}")
        try:
            out = get_json(f"{base}/api/policies/search", {"date": args.date})
        except requests.RequestException as e:
            print(f"   FAIL: {e}\n")
            return 1
        policies = out.get("policies", [])
        print(f"   policies: {len(policies)}")
        for policy in policies[:5]:
            print(f"   - {policy['policyNumber']} {policy['customerName']} ({policy['status']})")
        if out.get("message") or out.get("error"):
            print(f"   note: {out.get('message') or out.get('error')}")
        print()
        if not policy_number and policies:
            policy_number = policies[0]["policyNumber"]

    if not policy_number:
        print("No policy number given or found; skipping documents and detail.")
        return 0

    print(f"3) GET /api/policies/detail?policyNumber={policy_number}")
    try:
        detail = get_json(f"{base}/api/policies/detail", {"policyNumber": policy_number})
        policy = detail.get("policy") or {}
        print(f"   product: {policy.get('productName')}  status: {policy.get('status')}")
        print(f"   transactions: {len(detail.get('transactions', []))}  invoices: {len(detail.get('invoices', []))}")
        print(f"   coverage groups: {len(detail.get('coverages', []))}  beneficiaries: {len(detail.get('beneficiaries', []))}\n")
    except requests.RequestException as e:
        print(f"   FAIL: {e}\n")

    print(f"4) GET /api/policies/documents?policyNumber={policy_number}")
    try:
        out = get_json(f"{base}/api/policies/documents", {"policyNumber": policy_number})
    except requests.RequestException as e:
        print(f"   FAIL: {e}\n")
        return 1
    documents = out.get("documents", [])
    print(f"   documents: {len(documents)}")
    if out.get("hint"):
        print(f"   hint: {out['hint']}")
    for doc in documents[:5]:
        print(f"   - {doc['id']} {doc['documentName'] or doc['type']} ({doc['createdOn']})")
    print()

    if not args.download or not documents:
        print("=== Done ===")
        return 0

    doc = documents[0]
    print(f"5) GET /api/policies/documents/{doc['id']}/download")
    params = {"filename": doc["documentName"]} if doc["documentName"] else {}
    with requests.get(
        f"{base}/api/policies/documents/{doc['id']}/download", params=params, stream=True, timeout=120
    ) as r:
        if r.status_code >= 400:
            body = r.json()
            print(f"   FAIL: {r.status_code} {body.get('error')}")
            if body.get("hint"):
                print(f"   hint: {body['hint']}")
            return 1
        name = filename_from_disposition(r.headers.get("Content-Disposition")) or f"document-{doc['id']}"
        target = Path(args.out_dir) / Path(name).name
        with open(target, "wb") as f:
            for chunk in r.iter_content(chunk_size=65536):
                f.write(chunk)
    print(f"   saved: {target} ({target.stat().st_size} bytes)\n")
    print("=== Done ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
