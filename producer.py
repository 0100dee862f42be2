"""Synthetic sshd auth log generator.

Simulates a host with a handful of legitimate users logging in and a few
scanners hammering it with password guesses.  Each scanner owns a /24 and
rotates through addresses inside it, which is exactly what per-subnet
aggregation is meant to catch.  Lines are published to a Kafka topic that
``python -m sshwatch.main --source kafka`` consumes.

Usage:
    python producer.py
    python producer.py --normal 10 --scanners 3 --eps 5
    python producer.py --bootstrap-servers kafka-1:29092 --topic auth-log-lines
"""

import argparse
import random
import signal
import time
from dataclasses import dataclass, field
from datetime import datetime

from confluent_kafka import Producer
from confluent_kafka.admin import AdminClient, NewTopic

HOSTNAME = "bastion-01"
USERNAMES = ["deploy", "alice", "bob", "ci"]
GUESSED_USERNAMES = ["root", "admin", "oracle", "test", "ubuntu", "postgres", "git"]
AUTH_METHODS = ["publickey", "password"]

running = True


def _shutdown(sig, frame):
    global running
    print("\nShutting down generator...")
    running = False


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------

@dataclass
class Actor:
    name: str
    role: str  # normal | scanner
    prefix: str  # first three octets, e.g. "203.0.113"
    events_per_min: float
    usernames: list[str] = field(default_factory=list)


def _create_actors(n_normal, n_scanners):
    """Normal users each sit on one office/home address; scanners own a /24."""
    actors = []
    for i in range(n_normal):
        actors.append(Actor(
            name=f"user_{i + 1:03d}", role="normal",
            prefix=f"192.168.{random.randint(0, 254)}",
            events_per_min=random.uniform(0.5, 3),
            usernames=[random.choice(USERNAMES)],
        ))
    for i in range(n_scanners):
        actors.append(Actor(
            name=f"scanner_{i + 1:03d}", role="scanner",
            prefix=f"203.0.{random.randint(0, 254)}",
            events_per_min=random.uniform(20, 60),
            usernames=GUESSED_USERNAMES,
        ))
    return actors


# ---------------------------------------------------------------------------
# Line generation
# ---------------------------------------------------------------------------

def make_line(actor: Actor, now: datetime | None = None) -> str:
    """One sshd syslog line for *actor*.

    Normal users produce "Accepted ..." lines; scanners produce a mix of
    failed passwords, invalid users and dropped connections.
    """
    now = now or datetime.now()
    stamp = now.strftime("%b %d %H:%M:%S")
    pid = random.randint(1000, 65000)
    port = random.randint(1024, 65535)
    ip = f"{actor.prefix}.{random.randint(1, 254)}"
    user = random.choice(actor.usernames)
    head = f"{stamp} {HOSTNAME} sshd[{pid}]:"

    if actor.role == "normal":
        method = random.choice(AUTH_METHODS)
        return f"{head} Accepted {method} for {user} from {ip} port {port} ssh2"

    roll = random.random()
    if roll < 0.6:
        return f"{head} Failed password for invalid user {user} from {ip} port {port} ssh2"
    if roll < 0.9:
        return f"{head} Invalid user {user} from {ip} port {port}"
    return f"{head} Connection closed by {ip} port {port} [preauth]"


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

def _ensure_topics(bootstrap_servers, topics):
    """Create Kafka topics if they don't already exist."""
    admin = AdminClient({"bootstrap.servers": bootstrap_servers})
    new_topics = [NewTopic(t, num_partitions=1, replication_factor=1) for t in topics]
    fs = admin.create_topics(new_topics)
    for topic, f in fs.items():
        try:
            f.result()
            print(f"Created topic '{topic}'")
        except Exception as e:
            if "TOPIC_ALREADY_EXISTS" in str(e):
                print(f"Topic '{topic}' already exists")
            else:
                raise


# ---------------------------------------------------------------------------
# Main loop
# ---------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(description="Synthetic sshd auth log generator")
    parser.add_argument("--bootstrap-servers", default="localhost:9092")
    parser.add_argument("--topic", default="auth-log-lines")
    parser.add_argument("--normal", type=int, default=5)
    parser.add_argument("--scanners", type=int, default=2)
    parser.add_argument("--eps", type=float, default=2, help="Target lines/sec")
    args = parser.parse_args()

    signal.signal(signal.SIGINT, _shutdown)   # Ctrl+C (local dev)
    signal.signal(signal.SIGTERM, _shutdown)  # docker stop / k8s pod termination

    actors = _create_actors(args.normal, args.scanners)
    weights = [a.events_per_min for a in actors]

    print(f"Generating to topic '{args.topic}' at ~{args.eps} lines/sec")
    for a in actors:
        print(f"  {a.name:<12s} {a.role:<8s} ~{a.events_per_min:>5.1f} epm  net={a.prefix}.0/24")

    _ensure_topics(args.bootstrap_servers, [args.topic])

    # Single partition + line order == arrival order for the monitor.
    producer = Producer({
        "bootstrap.servers": args.bootstrap_servers,
        "acks": "all",
        "client.id": "sshd-line-generator",
    })

    count = 0
    delay = 1.0 / args.eps

    while running:
        actor = random.choices(actors, weights=weights, k=1)[0]
        producer.produce(topic=args.topic, value=make_line(actor).encode())
        producer.poll(0)

        count += 1
        if count % 100 == 0:
            print(f"  ... {count} lines produced")

        time.sleep(delay)

    producer.flush()
    print(f"Done. {count} lines produced.")


if __name__ == "__main__":
    main()
