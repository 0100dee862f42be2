"""Event sources — each one returns an iterator of raw log lines.

Sources attach eagerly (start the process, open the file) so a failure to
attach raises SourceError before the first line is read; the returned
generator then stops when the module-level ``running`` flag is cleared
(main.py installs SIGINT/SIGTERM handlers that call stop()).

    journalctl_lines  follow the ssh unit in the systemd journal
    file_lines        read a file (or stdin), optionally tail -f style
    kafka_lines       consume raw lines from a Kafka topic
"""

import subprocess
import sys
import time

from confluent_kafka import Consumer, KafkaError, KafkaException

running = True

# Child processes of live journalctl sources; stop() terminates them so a
# blocked read on a quiet journal ends with EOF.
_processes = []

# How long file_lines sleeps when following and no new data has arrived.
_FOLLOW_INTERVAL_SECONDS = 0.5


class SourceError(Exception):
    """The event source could not be attached (startup-fatal)."""


def stop() -> None:
    global running
    running = False
    for proc in list(_processes):
        proc.terminate()


def journalctl_lines(unit: str = "ssh.service"):
    # -n 0: only new entries, never replay history
    cmd = ["journalctl", "-f", "-n", "0", "-u", unit, "--no-pager"]
    try:
        proc = subprocess.Popen(
            cmd, stdout=subprocess.PIPE, text=True, errors="replace",
        )
    except OSError as e:
        raise SourceError(f"Could not start journalctl: {e}") from e
    _processes.append(proc)
    return _drain_process(proc)


def _drain_process(proc):
    try:
        for line in proc.stdout:
            if not running:
                break
            yield line
    finally:
        proc.terminate()
        proc.wait()
        if proc in _processes:
            _processes.remove(proc)


def file_lines(path: str, follow: bool = False):
    if path == "-":
        return _read_lines(sys.stdin, follow=False)
    try:
        f = open(path, "r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise SourceError(f"Could not open {path}: {e}") from e
    return _read_lines(f, follow)


def _read_lines(f, follow: bool):
    try:
        while running:
            line = f.readline()
            if line:
                yield line
            elif follow:
                time.sleep(_FOLLOW_INTERVAL_SECONDS)
            else:
                break
    finally:
        if f is not sys.stdin:
            f.close()


def kafka_lines(bootstrap_servers: str, topic: str, group_id: str):
    try:
        consumer = Consumer({
            "bootstrap.servers": bootstrap_servers,
            "group.id": group_id,
            "auto.offset.reset": "latest",
            "enable.auto.commit": True,
        })
        consumer.subscribe([topic])
    except KafkaException as e:
        raise SourceError(f"Could not subscribe to '{topic}': {e}") from e
    return _poll(consumer)


def _poll(consumer):
    try:
        while running:
            msg = consumer.poll(1.0)
            if msg is None:
                continue
            if msg.error():
                if msg.error().code() == KafkaError._PARTITION_EOF:
                    continue
                print(f"Consumer error: {msg.error()}", file=sys.stderr)
                continue
            value = msg.value()
            if value is None:
                continue  # tombstone
            yield value.decode("utf-8", errors="replace")
    finally:
        consumer.close()
