"""Tests for pgfluent.query mutation builders: INSERT, UPSERT, UPDATE and DELETE compilation."""

import pytest

from pgfluent import (
    DeleteQuery,
    EmptyUpdateError,
    InsertQuery,
    RowShapeError,
    UpdateQuery,
    UpsertQuery,
)


class TestInsert:

    def test_insert_single_row(self, client):
        query = client.from_("users").insert({"name": "John", "email": "john@example.com"})
        assert isinstance(query, InsertQuery)
        statement = query.compile()
        assert statement.sql == 'INSERT INTO "users" ("name", "email") VALUES ($1, $2)'
        assert statement.parameters == ["John", "john@example.com"]

    def test_insert_many_rows_with_returning(self, client):
        statement = client.from_("users").insert([{"name": "A"}, {"name": "B"}]).select().compile()
        assert statement.sql == 'INSERT INTO "users" ("name") VALUES ($1), ($2) RETURNING *'
        assert statement.parameters == ["A", "B"]

    def test_insert_columns_follow_first_row_order(self, client):
        statement = client.from_("users").insert([{"a": 1, "b": 2}, {"b": 4, "a": 3}]).compile()
        assert statement.sql == 'INSERT INTO "users" ("a", "b") VALUES ($1, $2), ($3, $4)'
        assert statement.parameters == [1, 2, 3, 4]

    def test_insert_mismatched_rows_raise_row_shape_error(self, client):
        query = client.from_("users").insert([{"name": "A"}, {"name": "B", "email": "b@x"}])
        with pytest.raises(RowShapeError, match="Row 1"):
            query.compile()

    def test_insert_values_are_coerced(self, client):
        statement = client.from_("events").insert(
            {"tags": ["a", "b"], "payload": {"k": 1}, "items": [{"id": 1}], "empty": [], "note": None}
        ).compile()
        assert statement.parameters == [["a", "b"], '{"k": 1}', '[{"id": 1}]', [], None]
        assert isinstance(statement.parameters[3], list)

    def test_returning_explicit_columns(self, client):
        statement = client.from_("users").insert({"name": "A"}).returning("id, name").compile()
        assert statement.sql == 'INSERT INTO "users" ("name") VALUES ($1) RETURNING "id", "name"'

    def test_insert_rejects_non_mapping_rows(self, client):
        with pytest.raises(TypeError):
            client.from_("users").insert(["not a row"])


class TestUpsert:

    def test_upsert_defaults_to_id_conflict_and_returns_rows(self, client):
        query = client.from_("users").upsert({"id": 1, "name": "Jane"})
        assert isinstance(query, UpsertQuery)
        statement = query.compile()
        assert statement.sql == (
            'INSERT INTO "users" ("id", "name") VALUES ($1, $2) '
            'ON CONFLICT ("id") DO UPDATE SET "name" = EXCLUDED."name" RETURNING *'
        )
        assert statement.parameters == [1, "Jane"]

    def test_upsert_composite_conflict_target(self, client):
        statement = client.from_("memberships").upsert(
            [{"user_id": 1, "team_id": 2, "role": "admin", "note": "x"}],
            on_conflict="user_id, team_id",
        ).compile()
        assert statement.sql == (
            'INSERT INTO "memberships" ("user_id", "team_id", "role", "note") VALUES ($1, $2, $3, $4) '
            'ON CONFLICT ("user_id", "team_id") DO UPDATE SET '
            '"role" = EXCLUDED."role", "note" = EXCLUDED."note" RETURNING *'
        )

    @pytest.mark.parametrize(
        "row, on_conflict",
        [
            ({"id": 1, "name": "a"}, "id"),
            ({"id": 1, "email": "e", "name": "a"}, "email"),
            ({"id": 1, "email": "e", "name": "a"}, "id,email"),
            ({"a": 1, "b": 2, "c": 3}, " c , a "),
        ],
    )
    def test_conflict_columns_never_updated(self, client, row, on_conflict):
        query = client.from_("t").upsert(row, on_conflict=on_conflict)
        set_clause = query.compile().sql.split("DO UPDATE SET ")[1]
        for column in query.conflict_columns:
            assert f'"{column}" = EXCLUDED' not in set_clause

    def test_upsert_only_conflict_columns_does_nothing_on_conflict(self, client):
        statement = client.from_("tags").upsert({"name": "x"}, on_conflict="name").compile()
        assert statement.sql == 'INSERT INTO "tags" ("name") VALUES ($1) ON CONFLICT ("name") DO NOTHING RETURNING *'


class TestUpdate:

    def test_update_numbers_filters_before_values(self, client):
        query = (
            client.from_("users")
            .update({"name": "Jane", "tags": ["a"]})
            .eq("id", 1)
            .gt("age", 3)
        )
        assert isinstance(query, UpdateQuery)
        statement = query.compile()
        assert statement.sql == 'UPDATE "users" SET "name" = $3, "tags" = $4 WHERE "id" = $1 AND "age" > $2'
        assert statement.parameters == [1, 3, "Jane", ["a"]]

    @pytest.mark.parametrize("filters, columns", [(0, 1), (1, 1), (2, 3), (4, 2)])
    def test_update_placeholder_alignment(self, client, filters, columns):
        query = client.from_("t").update({f"c{i}": f"v{i}" for i in range(columns)})
        for i in range(filters):
            query = query.eq(f"f{i}", i)
        statement = query.compile()
        for position in range(1, filters + columns + 1):
            assert f"${position}" in statement.sql
        assert f"${filters + columns + 1}" not in statement.sql
        assert statement.parameters == list(range(filters)) + [f"v{i}" for i in range(columns)]
        for i in range(columns):
            assert f'"c{i}" = ${filters + i + 1}' in statement.sql

    def test_update_without_filters_targets_whole_table(self, client):
        statement = client.from_("users").update({"active": False}).compile()
        assert statement.sql == 'UPDATE "users" SET "active" = $1'

    def test_update_with_returning(self, client):
        statement = client.from_("users").update({"name": "Jane"}).eq("id", 1).select().compile()
        assert statement.sql == 'UPDATE "users" SET "name" = $2 WHERE "id" = $1 RETURNING *'

    def test_update_coerces_json_values(self, client):
        statement = client.from_("users").update({"metadata": {"plan": "pro"}}).eq("id", 1).compile()
        assert statement.parameters == [1, '{"plan": "pro"}']

    def test_update_without_values_raises(self, client):
        with pytest.raises(EmptyUpdateError):
            client.from_("users").update({}).eq("id", 1).compile()


class TestDelete:

    def test_delete_with_filters(self, client):
        query = client.from_("users").delete().eq("id", 7)
        assert isinstance(query, DeleteQuery)
        statement = query.compile()
        assert statement.sql == 'DELETE FROM "users" WHERE "id" = $1'
        assert statement.parameters == [7]

    def test_delete_with_returning(self, client):
        statement = client.from_("users").delete().lt("age", 18).returning().compile()
        assert statement.sql == 'DELETE FROM "users" WHERE "age" < $1 RETURNING *'


def test_operation_entry_points_are_not_chainable(client):
    """Once an operation is chosen, the other entry points are not available."""
    select = client.from_("users").select()
    assert not hasattr(select, "insert")
    assert not hasattr(select, "update")
    insert = client.from_("users").insert({"name": "A"})
    assert not hasattr(insert, "upsert")
    assert not hasattr(insert, "eq")
