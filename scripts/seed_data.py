#!/usr/bin/env python3
"""
Seed script — creates a small community for trying out the feed.

Creates:
  • 8 profiles (entrepreneurs)
  • A business for every other profile
  • A follow graph (each profile follows 2-4 others; the last follows nobody,
    so its Following tab shows the global feed)
  • 3 posts per profile, some attached to the author's business
  • Likes and comments across posts

Run against a running API:
  python scripts/seed_data.py --api-url http://localhost:8000
"""
import argparse
import json
import random
import time
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Optional


PROFILES = [
    ("amara_builds", "Amara Okafor"),
    ("ben_bakes", "Ben Carter"),
    ("chen_ceramics", "Chen Wei"),
    ("diego_drones", "Diego Alvarez"),
    ("esi_events", "Esi Mensah"),
    ("farah_fintech", "Farah Haddad"),
    ("gus_greenhouse", "Gus Lindqvist"),
    ("hana_handmade", "Hana Sato"),
]

SAMPLE_POSTS = [
    "First customer order shipped today. Hand-packed every box myself.",
    "We just crossed 100 repeat customers. Word of mouth is still our best channel.",
    "Looking for a co-founder who loves logistics as much as I do.",
    "Pop-up market this Saturday. Come say hi!",
    "Lesson learned: price for the customer you want, not the one you have.",
    "Our new product line is live. Feedback welcome.",
    "Hired our first employee. Terrifying and exciting in equal measure.",
    "Cash flow beats revenue. Every single month.",
    "Pitching to a local investor group next week. Any tips?",
    "Switched suppliers and cut our lead time in half.",
    "Behind the scenes of our workshop, swipe for the mess.",
    "Two years ago this was a side project. Today it pays the rent.",
]

SAMPLE_COMMENTS = [
    "Congrats!",
    "This is inspiring.",
    "Would love to collaborate.",
    "How did you find your first customers?",
    "Saving this for later.",
]


@dataclass
class ApiClient:
    base_url: str

    def request(
        self,
        method: str,
        path: str,
        data: Optional[dict] = None,
        user_id: Optional[str] = None,
    ) -> dict:
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json"}
        if user_id:
            headers["X-User-Id"] = user_id
        body = json.dumps(data).encode() if data is not None else None
        req = urllib.request.Request(url, data=body, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=10) as resp:
                raw = resp.read()
                return json.loads(raw) if raw else {}
        except urllib.error.HTTPError as e:
            print(f"  HTTP {e.code} on {method} {path}: {e.read().decode()}")
            return {}

    def post(self, path: str, data: dict, user_id: Optional[str] = None) -> dict:
        return self.request("POST", path, data, user_id)

    def get(self, path: str) -> dict:
        return self.request("GET", path)


def wait_for_api(client: ApiClient, retries: int = 15) -> None:
    print(f"Waiting for API at {client.base_url} ...")
    for _ in range(retries):
        try:
            if client.get("/health").get("status") == "ok":
                print("  API is ready!\n")
                return
        except OSError:
            pass
        time.sleep(3)
    raise RuntimeError(f"API not reachable at {client.base_url} after {retries} retries")


def main(api_url: str) -> None:
    client = ApiClient(api_url)
    wait_for_api(client)

    # ── Profiles ─────────────────────────────────────────────────────────
    print("Creating profiles...")
    user_ids: list[str] = []
    for username, full_name in PROFILES:
        result = client.post(
            "/users",
            {"username": username, "full_name": full_name, "email": f"{username}@example.com"},
        )
        uid = result.get("id", "")
        if uid:
            user_ids.append(uid)
            print(f"  ✓ {username} ({uid})")
        else:
            print(f"  ✗ Failed to create {username}")

    if len(user_ids) < 2:
        print("Not enough profiles created — aborting")
        return

    # ── Businesses ───────────────────────────────────────────────────────
    print("\nCreating businesses...")
    business_by_owner: dict[str, str] = {}
    for (username, full_name), uid in zip(PROFILES[::2], user_ids[::2]):
        result = client.post("/businesses", {"name": f"{full_name.split()[0]} & Co"}, user_id=uid)
        if result.get("id"):
            business_by_owner[uid] = result["id"]
    print(f"  ✓ {len(business_by_owner)} businesses created")

    # ── Follow graph ─────────────────────────────────────────────────────
    print("\nCreating follow relationships...")
    loner = user_ids[-1]
    for follower_id in user_ids[:-1]:
        others = [u for u in user_ids if u != follower_id]
        for following_id in random.sample(others, k=min(random.randint(2, 4), len(others))):
            client.post("/users/follow", {"following_id": following_id}, user_id=follower_id)
    print("  ✓ Follow graph created")

    # ── Posts ────────────────────────────────────────────────────────────
    print("\nCreating posts...")
    post_ids: list[str] = []
    pool = random.sample(SAMPLE_POSTS, k=len(SAMPLE_POSTS)) * 2
    for i, uid in enumerate(user_ids * 3):
        body = {"content": pool[i % len(pool)]}
        if uid in business_by_owner and random.random() < 0.5:
            body["business_id"] = business_by_owner[uid]
        result = client.post("/posts", body, user_id=uid)
        if result.get("id"):
            post_ids.append(result["id"])
    print(f"  ✓ {len(post_ids)} posts created")

    # ── Likes & comments ─────────────────────────────────────────────────
    print("\nAdding likes and comments...")
    likes = comments = 0
    for post_id in post_ids:
        for uid in random.sample(user_ids, k=random.randint(0, 4)):
            client.post(f"/posts/{post_id}/like", {}, user_id=uid)
            likes += 1
        if random.random() < 0.4:
            uid = random.choice(user_ids)
            client.post(f"/posts/{post_id}/comments", {"content": random.choice(SAMPLE_COMMENTS)}, user_id=uid)
            comments += 1
    print(f"  ✓ {likes} likes, {comments} comments added")

    # ── Summary ──────────────────────────────────────────────────────────
    print("\n" + "=" * 60)
    print("Seed complete! Some commands to try:\n")
    u = user_ids[0]
    print(f"# 'Following' timeline for {PROFILES[0][0]}:")
    print(f"  curl -s -H 'X-User-Id: {u}' '{api_url}/feed?tab=following' | python3 -m json.tool\n")
    print(f"# {PROFILES[len(user_ids) - 1][0]} follows nobody, so this shows the global feed:")
    print(f"  curl -s -H 'X-User-Id: {loner}' '{api_url}/feed?tab=following' | python3 -m json.tool\n")
    print(f"# Home page: {api_url}/")
    print("=" * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Social Feed API")
    parser.add_argument("--api-url", default="http://localhost:8000", help="API base URL")
    args = parser.parse_args()
    main(args.api_url)
