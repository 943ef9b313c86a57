#!/usr/bin/env python3
"""
Validation script for the short link service.
Exercises a live running service over HTTP.

Usage:
    python validate_service.py --url http://localhost:9200
"""

import argparse
import sys
import time
from datetime import datetime
from typing import Optional

import requests


class ServiceValidator:
    """Validates short link service functionality."""

    def __init__(self, base_url: str = "http://localhost:9200", timeout: float = 5):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.test_results = []

    def print_header(self, text: str):
        """Print a formatted header."""
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def record(self, name: str, passed: bool, details: str = "") -> bool:
        """Record and print a check result."""
        status = "PASS" if passed else "FAIL"
        self.test_results.append((name, passed))
        print(f"[{status}] {name}")
        if details:
            print(f"       {details}")
        return passed

    def _get(self, path: str, **kwargs) -> requests.Response:
        return self.session.get(f"{self.base_url}{path}", timeout=self.timeout, **kwargs)

    def _shorten(self, url: str, dedup: Optional[bool] = None) -> requests.Response:
        body = {"url": url}
        if dedup is not None:
            body["dedup"] = dedup
        return self.session.post(f"{self.base_url}/api/shorten", json=body, timeout=self.timeout)

    def check_health(self) -> bool:
        response = self._get("/api/health")
        data = response.json() if response.status_code == 200 else {}
        return self.record(
            "Health Check",
            data.get("status") == "healthy",
            f"DB: {data.get('database')}, Cache: {data.get('cache', 'N/A')}",
        )

    def check_shorten(self, target_url: str) -> Optional[str]:
        response = self._shorten(target_url)
        code = response.json().get("code") if response.status_code == 200 else None
        self.record(
            "Create Short Link",
            code is not None,
            f"Status: {response.status_code}, Code: {code}",
        )
        return code

    def check_dedup(self, target_url: str, code: str) -> bool:
        response = self._shorten(target_url)
        same = response.status_code == 200 and response.json().get("code") == code
        return self.record("Dedup Returns Same Code", same, f"Status: {response.status_code}")

    def check_redirect(self, code: str, target_url: str) -> bool:
        response = self._get(f"/{code}", allow_redirects=False)
        location = response.headers.get("Location", "")
        return self.record(
            "Redirect",
            response.status_code == 302 and location == target_url,
            f"Status: {response.status_code}, Location: {location[:50]}",
        )

    def check_clicks(self, code: str) -> bool:
        response = self._get(f"/api/links/{code}")
        clicks = response.json().get("clicks") if response.status_code == 200 else None
        return self.record("Click Counted", bool(clicks), f"Clicks: {clicks}")

    def check_status(self, name: str, response: requests.Response, expected: int) -> bool:
        return self.record(
            name,
            response.status_code == expected,
            f"Status: {response.status_code} (expected {expected})",
        )

    def run_all_tests(self) -> bool:
        """Run all validation checks."""
        self.print_header("Short Link Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.check_health():
            print(f"\nHealth check failed. Make sure the service is accessible at {self.base_url}")
            return False

        target_url = f"https://example.com/validate/{int(time.time())}"
        code = self.check_shorten(target_url)
        if code:
            self.check_dedup(target_url, code)
            self.check_redirect(code, target_url)
            self.check_clicks(code)

        self.check_status("Invalid URL Rejection", self._shorten("not a url"), 400)
        self.check_status("Non-http Scheme Rejection", self._shorten("ftp://host/x"), 400)
        self.check_status("Unknown Code", self._get("/api/resolve/zzzzzz"), 404)
        self.check_status("Stats Endpoint", self._get("/api/stats"), 200)

        self.print_summary()
        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        """Print check summary."""
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)

        self.print_header("Summary")
        print(f"Total:  {total}")
        print(f"Passed: {passed}")
        print(f"Failed: {total - passed}")

        for name, ok in self.test_results:
            if not ok:
                print(f"   - {name}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Validate short link service functionality"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:9200",
        help="Base URL of the service (default: http://localhost:9200)"
    )

    args = parser.parse_args()

    validator = ServiceValidator(args.url)

    try:
        success = validator.run_all_tests()
    except requests.RequestException as e:
        print(f"\nValidation failed with error: {e}")
        sys.exit(3)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
