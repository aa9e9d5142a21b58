"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags integrity    # Location delete vs. new occurrences
  locust -f locustfile.py --tags throughput   # Schedule read-models
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
from locust import HttpUser, task, between, tag
from datetime import datetime, timedelta

# Shared state
EVENT_IDS = []
LOCATION_IDS = []


def future_start(max_days: int = 60) -> str:
    start = datetime.now().replace(minute=0, second=0, microsecond=0)
    return (start + timedelta(days=random.randint(1, max_days), hours=random.randint(0, 5))).isoformat()


def create_location(client, name: str):
    resp = client.post("/api/v1/locations/", json={"name": name, "address": "Teststraße 1"})
    if resp.status_code == 201:
        return resp.json()["id"]
    return None


def create_event(client, location_id: str, occurrences: int = 3):
    resp = client.post(
        "/api/v1/events/",
        json={
            "event": {"title": f"Kurs {random.randint(1, 10000)}", "teaser": "", "description": ""},
            "occurrences": [
                {"start": future_start(), "duration": 90, "location_id": location_id}
                for _ in range(occurrences)
            ],
        },
        name="/api/v1/events/ [create]",
    )
    if resp.status_code == 201:
        return resp.json()["id"]
    return None


class IntegrityUser(HttpUser):
    """
    TEST 1: Referential integrity under contention

    Run: locust -f locustfile.py --tags integrity -u 50 -r 25 --run-time 30s

    Half the users attach events to a shared location, the other half try to
    delete it. A delete must either succeed (no occurrences left) or answer
    409. After the test, verify no occurrence points at a deleted location:
      SELECT COUNT(*) FROM occurrences o
      LEFT JOIN locations l ON l.id = o.location_id WHERE l.id IS NULL;
    Should be 0
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        if not LOCATION_IDS:
            location_id = create_location(self.client, "Contention Hall")
            if location_id:
                LOCATION_IDS.append(location_id)

    @tag("integrity")
    @task(3)
    def attach_event(self):
        if not LOCATION_IDS:
            return
        with self.client.post(
            "/api/v1/events/",
            json={
                "event": {"title": "Contention", "teaser": "", "description": ""},
                "occurrences": [
                    {"start": future_start(), "duration": 60, "location_id": LOCATION_IDS[0]}
                ],
            },
            name="/api/v1/events/ [attach]",
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                EVENT_IDS.append(resp.json()["id"])
                resp.success()
            elif resp.status_code == 503:
                resp.success()  # serialization failure, retryable
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("integrity")
    @task(1)
    def delete_location(self):
        if not LOCATION_IDS:
            return
        with self.client.delete(
            f"/api/v1/locations/{LOCATION_IDS[0]}",
            name="/api/v1/locations/{id} [delete]",
            catch_response=True,
        ) as resp:
            if resp.status_code in (200, 404, 409, 503):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - schedule read-models

    Run: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s

    Compare avg response time and P95/P99 latency of /schedule and
    /overview as the number of events grows.
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        if len(EVENT_IDS) < 20:
            location_id = create_location(self.client, f"Saal {random.randint(1, 100)}")
            if location_id:
                LOCATION_IDS.append(location_id)
                event_id = create_event(self.client, location_id, occurrences=5)
                if event_id:
                    EVENT_IDS.append(event_id)

    @tag("throughput", "read")
    @task(10)
    def schedule(self):
        self.client.get("/api/v1/schedule")

    @tag("throughput", "read")
    @task(3)
    def schedule_window(self):
        after = datetime.now() + timedelta(days=random.randint(0, 30))
        before = after + timedelta(days=7)
        self.client.get(
            "/api/v1/schedule",
            params={
                "after": after.strftime("%Y-%m-%dT%H:%M:%S"),
                "before": before.strftime("%Y-%m-%dT%H:%M:%S"),
            },
            name="/api/v1/schedule [window]",
        )

    @tag("throughput", "read")
    @task(3)
    def event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @tag("throughput", "read")
    @task(2)
    def overview(self):
        self.client.get("/api/v1/overview")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def malformed_id(self):
        with self.client.get("/api/v1/events/999999", catch_response=True) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.get(
            "/api/v1/events/00000000-0000-0000-0000-000000000000", catch_response=True
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def inverted_range(self):
        with self.client.get(
            "/api/v1/schedule?after=2024-06-02T00:00:00&before=2024-06-01T00:00:00",
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def garbage_date(self):
        with self.client.get("/api/v1/schedule?before=soon", catch_response=True) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def negative_duration(self):
        with self.client.post(
            "/api/v1/events/",
            json={
                "event": {"title": "Broken"},
                "occurrences": [
                    {
                        "start": future_start(),
                        "duration": -5,
                        "location_id": "00000000-0000-0000-0000-000000000000",
                    }
                ],
            },
            catch_response=True,
        ) as resp:
            self._expect(resp, [422])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/v1/locations/", data="not json at all", catch_response=True
        ) as resp:
            self._expect(resp, [400, 422])


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing the schedule (80%)
      - Some event detail views (15%)
      - Rare creates (5%)
    """
    wait_time = between(1, 3)

    @task(50)
    def browse_events(self):
        resp = self.client.get("/api/v1/events/")
        if resp.status_code == 200:
            for event_id in resp.json():
                if event_id not in EVENT_IDS:
                    EVENT_IDS.append(event_id)

    @task(30)
    def browse_schedule(self):
        self.client.get("/api/v1/schedule")

    @task(15)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @task(3)
    def create_event(self):
        if not LOCATION_IDS:
            location_id = create_location(self.client, "Venue")
            if location_id:
                LOCATION_IDS.append(location_id)
        if LOCATION_IDS:
            event_id = create_event(self.client, random.choice(LOCATION_IDS))
            if event_id:
                EVENT_IDS.append(event_id)
