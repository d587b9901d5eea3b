"""
SecureAuth - Attack Demonstration

Run: python attack_demo.py

What it shows (and why attacks fail):
1) A wrong password does not verify.
2) Editing the stored hash in users.txt locks the user out instead of letting anyone in.
3) Swapping salts between two users breaks both logins (hash/salt pairing).
4) Same password, different users: different salts give different hashes.
5) Brute force is slow: every guess costs a full Argon2id run.
6) Garbage lines in the store are skipped, not trusted.
"""

import os
import tempfile
import time

from secureauth import crypto
from secureauth.registry import UserRegistry
from secureauth.service import CredentialService


LINE = "=" * 70

# Demo uses the lighter tier so it finishes quickly
PARAMS = crypto.INTERACTIVE


def section(title: str):
    print(f"\n{LINE}\n{title}\n{LINE}")


def rewrite_store(path: str, transform):
    with open(path, "r", encoding="utf-8") as f:
        lines = f.read().splitlines()
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(transform(lines)) + "\n")


def main():
    tmp_dir = tempfile.mkdtemp(prefix="secureauth-demo-")
    store_path = os.path.join(tmp_dir, "users.txt")
    password = "CorrectHorse9!Battery"

    service = CredentialService(UserRegistry.load(store_path), hash_params=PARAMS)
    service.register("alice", password, password)
    service.register("bob", password, password)
    alice = service.registry.lookup("alice")
    bob = service.registry.lookup("bob")
    unexpected = 0

    # 1) Wrong password
    section("Attack 1: Wrong password")
    result = service.authenticate("alice", password + "x")
    if result.matched:
        print("Unexpected: wrong password accepted")
        unexpected += 1
    else:
        print(f"Expected failure: {result.message}")

    # 2) Hash tampering in the store
    section("Attack 2: Tampering with the stored hash")
    def zero_alice_hash(lines):
        out = []
        for line in lines:
            username, password_hash, salt = line.split(",")
            if username == "alice":
                password_hash = "0" * len(password_hash)
            out.append(f"{username},{password_hash},{salt}")
        return out

    rewrite_store(store_path, zero_alice_hash)
    service = CredentialService(UserRegistry.load(store_path), hash_params=PARAMS)
    result = service.authenticate("alice", password)
    if result.matched:
        print("Unexpected: tampered hash still verified")
        unexpected += 1
    else:
        print("Expected failure: tampered hash no longer matches any password")

    # 3) Salt swap
    section("Attack 3: Swapping salts between users")
    print(f"alice salt: {alice.salt}")
    print(f"bob salt:   {bob.salt}")
    ok = crypto.verify_password(password, bob.password_hash, alice.salt, PARAMS)
    if ok:
        print("Unexpected: bob's hash verified with alice's salt")
        unexpected += 1
    else:
        print("Expected failure: a hash only verifies with the salt it was made with")

    # 4) Same password, different hashes
    section("Attack 4: Looking for users with the same password")
    if alice.password_hash != bob.password_hash:
        print("Expected: identical passwords produced different hashes (unique salts)")
    else:
        print("Unexpected: identical hashes")
        unexpected += 1

    # 5) Brute force cost
    section("Attack 5: Offline brute force")
    guesses = ["password123!", "Password123!", "Qwerty123456!"]
    start = time.perf_counter()
    hits = [g for g in guesses if crypto.verify_password(g, bob.password_hash, bob.salt, PARAMS)]
    elapsed = time.perf_counter() - start
    print(f"{len(guesses)} guesses took {elapsed:.2f}s ({elapsed / len(guesses):.2f}s each, "
          f"{PARAMS.memory_cost // 1024} MiB per guess), {len(hits)} hits")
    if hits:
        print("Unexpected: a guess matched")
        unexpected += 1
    print(f"Default tier uses {crypto.MODERATE.memory_cost // 1024} MiB per guess")

    # 6) Garbage in the store
    section("Attack 6: Injecting malformed lines into the store")
    rewrite_store(store_path, lambda lines: lines + [
        "mallory,notahexhash,zz",
        "eve,onlytwofields",
        "root!,00,00",
    ])
    registry = UserRegistry.load(store_path)
    print(f"Users after reload: {registry.usernames()}")
    if any(name in registry for name in ("mallory", "eve", "root!")):
        print("Unexpected: malformed record accepted")
        unexpected += 1
    else:
        print("Expected: malformed lines skipped")

    # Cleanup
    for name in os.listdir(tmp_dir):
        os.unlink(os.path.join(tmp_dir, name))
    os.rmdir(tmp_dir)
    if unexpected:
        print(f"\nDemo complete. {unexpected} attack(s) did NOT fail as expected.")
    else:
        print("\nDemo complete. All showcased attacks failed as expected.")
    return unexpected == 0


if __name__ == "__main__":
    import sys
    sys.exit(0 if main() else 1)
