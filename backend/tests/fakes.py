"""
In-memory stand-ins for the redis client used by the stat cache tests.
"""

import redis


class FakeRedis:
    """Records redis hash commands in memory, returning bytes like redis-py does."""

    def __init__(self):
        self.hashes = {}
        self.commands = []

    def hgetall(self, key):
        return {k.encode(): str(v).encode() for k, v in self.hashes.get(key, {}).items()}

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    def ping(self):
        return True


class FakePipeline:
    def __init__(self, client):
        self.client = client
        self.queued = []

    def delete(self, key):
        self.queued.append(("delete", key))

    def hset(self, key, mapping):
        self.queued.append(("hset", key, dict(mapping)))

    def hincrby(self, key, field, amount):
        self.queued.append(("hincrby", key, field, amount))

    def execute(self):
        for command in self.queued:
            self.client.commands.append(command[0])
            if command[0] == "delete":
                self.client.hashes.pop(command[1], None)
            elif command[0] == "hset":
                self.client.hashes.setdefault(command[1], {}).update(command[2])
            else:
                _, key, field, amount = command
                record = self.client.hashes.setdefault(key, {})
                record[field] = record.get(field, 0) + amount
        self.queued = []
        return []


class BrokenRedis:
    """A client whose server is unreachable."""

    def hgetall(self, key):
        raise redis.ConnectionError("connection refused")

    def pipeline(self, transaction=True):
        raise redis.ConnectionError("connection refused")

    def ping(self):
        raise redis.ConnectionError("connection refused")
