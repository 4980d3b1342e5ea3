from toongraph.rows import INDENT, decode_row, encode_row, split_row


def test_split_row_respects_quotes():
    assert split_row('a,"b,c",d') == ["a", '"b,c"', "d"]
    assert split_row('"a ""x"" b",c') == ['"a ""x"" b"', "c"]
    assert split_row(" a , b ") == ["a", "b"]
    assert split_row("") == [""]


def test_split_row_tolerates_unbalanced_quotes():
    assert split_row('"a,b') == ['"a,b']
    assert split_row('a"b,c') == ['a"b,c']


def test_encode_row_follows_field_order():
    line = encode_row(["label", "id"], {"id": "A", "label": "x,y"})
    assert line == INDENT + '"x,y",A'


def test_encode_row_writes_missing_values_empty():
    assert encode_row(["source", "target", "relation", "label"], {"source": "A", "target": "B"}) == "  A,B,,"


def test_row_round_trip():
    fields = ("id", "label", "count", "active")
    row = {"id": "n1", "label": "a, b", "count": 3, "active": True}
    assert decode_row(encode_row(fields, row), fields) == row


def test_single_field_round_trip():
    assert decode_row(encode_row(["x"], {"x": "v"}), ["x"]) == {"x": "v"}


def test_short_rows_leave_trailing_fields_unset():
    assert decode_row("  A", ["id", "label", "type"]) == {"id": "A", "label": None, "type": None}


def test_surplus_cells_are_dropped():
    assert decode_row("  A,B,C", ["id"]) == {"id": "A"}


def test_text_fields_are_not_coerced():
    row = decode_row("  007,12,true", ["id", "n", "flag"], text_fields={"id"})
    assert row == {"id": "007", "n": 12, "flag": True}
