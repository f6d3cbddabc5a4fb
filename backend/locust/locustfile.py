"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags admission    # Overlapping admission passes
  locust -f locustfile.py --tags throughput   # Test cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

Tokens are minted with the service's SECRET_KEY, so run with the same
environment as the API.
"""

import random
import string
from locust import HttpUser, task, between, tag, events

from admissions.core.security import create_access_token

HOSPITALS = ["Atascadero", "Coalinga", "Metropolitan", "Napa", "Patton"]
ADMITTED = []  # (hospital, patient_id) pairs seen in admission responses


def random_name():
    return "Patient " + "".join(random.choices(string.ascii_uppercase, k=6))


def random_exclusions():
    return random.sample(HOSPITALS, k=random.randint(0, len(HOSPITALS)))


def auth_headers():
    token = create_access_token(data={"sub": f"load-{random.randint(10000, 99999)}"})
    return {"Authorization": f"Bearer {token}"}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "="*60)
    print("Admissions load test starting")
    print("="*60)


class AdmissionUser(HttpUser):
    """
    TEST 1: Concurrency - many clerks adding patients and running passes

    Run: locust -f locustfile.py --tags admission -u 100 -r 50 --run-time 30s

    After test, verify no patient was admitted twice or to an excluded hospital:
      SELECT p.id FROM patients p
      JOIN patient_disallowed_hospitals d ON d.patient_id = p.id
      WHERE d.hospital_id = p.hospital_id;
    Should return no rows
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = auth_headers()

    @tag("admission")
    @task(5)
    def add_patient(self):
        with self.client.post("/api/v1/waitlist",
            json={"name": random_name(), "disallowAdmissionTo": random_exclusions()},
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("admission")
    @task(1)
    def admit_from_waitlist(self):
        with self.client.post("/api/v1/hospitals/admit-from-waitlist",
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unexpected: {resp.status_code}")
                return
            for patient in resp.json():
                if patient["admittedTo"] in patient["disallowAdmissionTo"]:
                    resp.failure(f"Patient {patient['id']} admitted to excluded hospital")
                    return
                ADMITTED.append((patient["admittedTo"], patient["id"]))
            resp.success()

    @tag("admission")
    @task(1)
    def discharge(self):
        """Send an admitted patient back to the waitlist."""
        if not ADMITTED:
            return
        hospital, patient_id = ADMITTED.pop(random.randrange(len(ADMITTED)))
        self.client.delete(f"/api/v1/hospitals/{hospital}/{patient_id}",
            headers=self.headers,
            name="/api/v1/hospitals/{name}/{patient_id}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: Stop Redis, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        self.headers = auth_headers()

    @tag("throughput", "read")
    @task(10)
    def list_hospitals_cached(self):
        self.client.get("/api/v1/hospitals", headers=self.headers,
            name="/api/v1/hospitals [cached]")

    @tag("throughput", "read")
    @task(3)
    def get_hospital_detail(self):
        self.client.get(f"/api/v1/hospitals/{random.choice(HOSPITALS)}",
            headers=self.headers,
            name="/api/v1/hospitals/{name}")

    @tag("throughput", "read")
    @task(3)
    def view_waitlist(self):
        self.client.get("/api/v1/waitlist", headers=self.headers)

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

    def on_start(self):
        self.headers = auth_headers()

    def expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_exclusion(self):
        with self.client.post("/api/v1/waitlist",
            json={"name": random_name(), "disallowAdmissionTo": ["Nowhere General"]},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self.expect(resp, [400])

    @tag("edge")
    @task
    def resubmit_with_id(self):
        with self.client.post("/api/v1/waitlist",
            json={"id": "3fa85f64-5717-4562-b3fc-2c963f66afa6", "name": random_name()},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self.expect(resp, [409])

    @tag("edge")
    @task
    def unknown_hospital(self):
        with self.client.get("/api/v1/hospitals/Nowhere",
            headers=self.headers,
            catch_response=True
        ) as resp:
            self.expect(resp, [404])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/waitlist",
            data="not json at all",
            headers=self.headers,
            catch_response=True
        ) as resp:
            self.expect(resp, [400, 422])

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/v1/waitlist",
            json={"name": random_name()},
            catch_response=True
        ) as resp:
            self.expect(resp, [401])
