"""SQL generation for the PostgreSQL backend; no database connection needed."""
from catalog.database.database import compile_filter, compile_sort
from catalog.database.filters import Filter, Sort

class TestCompileFilter:
    def test_empty_filter(self):
        assert compile_filter(Filter()) == ("TRUE", [])

    def test_active_with_search(self):
        flt = Filter.active().search(["name", "description"], "web")

        where, params = compile_filter(flt)

        assert where == (
            '"is_deleted" = $1 AND '
            '("name" ILIKE $2 ESCAPE \'\\\' OR "description" ILIKE $3 ESCAPE \'\\\')'
        )
        assert params == [False, "%web%", "%web%"]

    def test_like_wildcards_escaped(self):
        _, params = compile_filter(Filter().search(["name"], "100%_off"))
        assert params == ["%100\\%\\_off%"]

    def test_operators(self):
        flt = (
            Filter()
            .where("deleted_at", None)
            .exclude("id", "abc")
            .where_in("id", ["a", "b"])
            .has("categories", "c1")
        )

        where, params = compile_filter(flt)

        assert where == (
            '"deleted_at" IS NULL AND "id" IS DISTINCT FROM $1 AND '
            '"id" = ANY($2) AND $3 = ANY("categories")'
        )
        assert params == ["abc", ["a", "b"], "c1"]

    def test_placeholders_continue_existing_params(self):
        where, params = compile_filter(Filter().where("name", "Web"), ["first"])

        assert where == '"name" = $2'
        assert params == ["first", "Web"]

class TestCompileSort:
    def test_descending(self):
        assert compile_sort(Sort("created_at")) == 'ORDER BY "created_at" DESC NULLS LAST'

    def test_ascending(self):
        assert compile_sort(Sort.parse("name", "asc")) == 'ORDER BY "name" ASC NULLS FIRST'
