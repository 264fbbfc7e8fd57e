"""Structured error payloads."""
from rostermatch.errors import (
    DuplicateIdentifier,
    InvalidSetting,
    RosterMatchError,
    SchemaUnknown,
    SheetMissing,
    SourceNotFound,
    UnreadableContainer,
)


class TestErrors:

    def test_to_dict(self):
        err = SheetMissing("rural.xlsx", 1, 1)
        data = err.to_dict()
        assert data["success"] is False
        assert data["type"] == "SheetMissing"
        assert data["error"] == "Cannot find worksheet at index 1 in rural.xlsx"
        assert data["context"] == {"path": "rural.xlsx", "sheet_index": 1, "sheet_count": 1}
        assert "recommendation" in data

    def test_status_codes(self):
        assert SourceNotFound("a.xlsx").http_status == 404
        assert UnreadableContainer("a.xlsx", "bad zip").http_status == 422
        assert SheetMissing("a.xlsx", 2, 1).http_status == 422
        assert SchemaUnknown("x").http_status == 400
        assert DuplicateIdentifier({"A1": [1, 2]}).http_status == 409
        assert InvalidSetting("worker count", "0", "a positive integer").http_status == 400

    def test_all_share_base(self):
        for err in (SourceNotFound("a"), UnreadableContainer("a", "b"), SchemaUnknown("x")):
            assert isinstance(err, RosterMatchError)
            assert str(err) == err.message

    def test_minimal_payload(self):
        data = RosterMatchError("boom").to_dict()
        assert data == {"success": False, "error": "boom", "type": "RosterMatchError"}
