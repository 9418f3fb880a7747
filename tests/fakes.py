from types import SimpleNamespace


class FakeQuery:
    """supabase-py 쿼리 빌더 흉내 (호출 기록만 남김)"""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.calls = []
        self.inserted = None
        self.upserted = None
        self.updated = None
        self.deleting = False

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def or_(self, *args, **kwargs):
        return self._record("or_", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._record("limit", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record("eq", *args, **kwargs)

    def gt(self, *args, **kwargs):
        return self._record("gt", *args, **kwargs)

    def ilike(self, *args, **kwargs):
        return self._record("ilike", *args, **kwargs)

    def insert(self, data):
        self.inserted = data
        return self._record("insert", data)

    def upsert(self, data, **kwargs):
        self.upserted = data
        return self._record("upsert", data, **kwargs)

    def update(self, data):
        self.updated = data
        return self._record("update", data)

    def delete(self):
        self.deleting = True
        return self._record("delete")

    def call(self, name):
        return [c for c in self.calls if c[0] == name]

    def execute(self):
        self.client.executed.append(self)
        if self.client.error is not None:
            raise self.client.error

        stored = self.client.rows_for(self.table)

        if self.inserted is not None:
            row = {"id": self.client.next_id(), "created_at": "2025-01-01T00:00:00+00:00", **self.inserted}
            stored.append(row)
            return SimpleNamespace(data=[row])

        if self.upserted is not None:
            keys = self.call("upsert")[0][2].get("on_conflict", "id").split(",")
            for row in stored:
                if all(row.get(k) == self.upserted.get(k) for k in keys):
                    row.update(self.upserted)
                    return SimpleNamespace(data=[row])
            row = {"id": self.client.next_id(), **self.upserted}
            stored.append(row)
            return SimpleNamespace(data=[row])

        rows = list(stored)
        for _, (column, value), _ in self.call("eq"):
            rows = [r for r in rows if r.get(column) == value]

        if self.updated is not None:
            for row in rows:
                row.update(self.updated)
            return SimpleNamespace(data=rows)

        if self.deleting:
            for row in rows:
                stored.remove(row)
            return SimpleNamespace(data=rows)

        for _, (n,), _ in self.call("limit"):
            rows = rows[:n]
        return SimpleNamespace(data=rows)


class FakeSupabase:
    def __init__(self, rows=None, error=None, tables=None):
        self.rows = list(rows or [])      # interview_posts
        self.tables = {k: list(v) for k, v in (tables or {}).items()}
        self.error = error
        self.executed = []
        self._ids = 0

    def rows_for(self, table):
        if table == "interview_posts":
            return self.rows
        return self.tables.setdefault(table, [])

    def next_id(self):
        self._ids += 1
        return "new-id" if self._ids == 1 else f"new-id-{self._ids}"

    def table(self, name):
        return FakeQuery(self, name)

    @property
    def last(self):
        return self.executed[-1]


def make_row(id="exp-1", company="Google", role="Software Engineer", full_text=None, rounds=None, **extra):
    row = {
        "id": id,
        "company": company,
        "role": role,
        "user_name": "alice",
        "user_id": "user-1",
        "date": "2025-03-01",
        "rounds": rounds if rounds is not None else [
            {
                "type": "coding-round",
                "difficulty": "Medium",
                "questions": ["Reverse a linked list"],
                "answers": ["Iterative with three pointers"],
                "experience": "Friendly interviewer, 45 minutes",
            }
        ],
        "full_text": full_text if full_text is not None else f"{company} {role} coding-round Reverse a linked list",
        "average_rating": 4.5,
        "rating_count": 2,
        "upvote_count": 3,
        "created_at": "2025-03-02T10:00:00+00:00",
    }
    row.update(extra)
    return row
