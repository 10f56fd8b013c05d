"""
Data Loader Script - Loads sample_students.json into the platform via API.

Reads a JSON array of student records and posts each one to
POST /api/students. Records whose ID already exists are reported and
left alone.

Usage:
    python load_data.py                                       # Uses default URL and file
    python load_data.py http://localhost:8000                 # Custom API URL
    python load_data.py http://backend:8000 students.json     # Custom URL and file
"""

import json
import sys
import os

import httpx


def load_students(path):
    with open(path, 'r', encoding='utf-8') as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError("{} must contain a JSON array of student records".format(path))
    return records


def post_students(client, records):
    """POST each record; returns a list of (student_id, status, detail)."""
    results = []
    for record in records:
        student_id = record.get("id", "?")
        try:
            resp = client.post("/api/students", json=record)
        except httpx.HTTPError as e:
            results.append((student_id, "ERROR", str(e)))
            continue

        if resp.status_code == 201:
            results.append((student_id, "CREATED", record.get("name", "")))
        elif resp.status_code == 409:
            results.append((student_id, "EXISTS", resp.json().get("message", "")))
        else:
            results.append((student_id, "ERROR", "HTTP {}: {}".format(resp.status_code, resp.text[:200])))
    return results


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    api_url = argv[0] if len(argv) > 0 else os.getenv("API_URL", "http://localhost:8000")

    # Locate the data file
    data_file = argv[1] if len(argv) > 1 else os.path.join(
        os.path.dirname(os.path.abspath(__file__)), "sample_students.json")
    if not os.path.exists(data_file):
        print(f"Error: Could not find {data_file}")
        return 1

    print(f"Loading data from: {data_file}")
    records = load_students(data_file)
    print(f"Found {len(records)} students, sending to: {api_url}/api/students")
    print()

    with httpx.Client(base_url=api_url, timeout=30.0) as client:
        results = post_students(client, records)

    created = sum(1 for _, status, _ in results if status == "CREATED")
    existing = sum(1 for _, status, _ in results if status == "EXISTS")
    errors = sum(1 for _, status, _ in results if status == "ERROR")

    print("=" * 60)
    print("LOAD SUMMARY")
    print("=" * 60)
    print(f"  Total Records:   {len(records)}")
    print(f"  Created:         {created}")
    print(f"  Already Existed: {existing}")
    print(f"  Errors:          {errors}")
    print("=" * 60)
    print()

    for student_id, status, detail in results:
        print(f"  {student_id}: {status} ({detail})")

    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
