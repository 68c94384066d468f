"""
Tests for the Flash notification queue.
"""

from restmachine_resources import Flash


class TestFlash:
    """Test persisted and this-request-only messages."""

    def test_set_is_carried_forward(self):
        """Test that flash[key] survives into the next request."""
        flash = Flash()
        flash["success"] = "Saved"

        assert flash["success"] == "Saved"
        assert flash.to_session_value() == {"flashes": {"success": "Saved"}}

    def test_now_is_not_carried_forward(self):
        """Test that flash.now[key] is visible but not stored."""
        flash = Flash()
        flash.now["error"] = "Failed"

        assert flash["error"] == "Failed"
        assert flash.now["error"] == "Failed"
        assert flash.to_session_value() is None

    def test_discard_single_key(self):
        """Test that discard drops one key at the end of the request."""
        flash = Flash()
        flash["success"] = "Saved"
        flash["notice"] = "Hi"

        flash.discard("success")

        assert "success" in flash
        assert flash.is_discarded("success")
        assert flash.to_session_value() == {"flashes": {"notice": "Hi"}}

    def test_discard_all(self):
        """Test that discard without a key drops everything."""
        flash = Flash()
        flash["success"] = "Saved"
        flash["notice"] = "Hi"

        flash.discard()

        assert flash.to_session_value() is None

    def test_set_after_discard_persists_again(self):
        """Test that assigning a discarded key carries it forward again."""
        flash = Flash()
        flash.now["error"] = "Failed"
        flash["error"] = "Failed for real"

        assert flash.to_session_value() == {"flashes": {"error": "Failed for real"}}

    def test_keep(self):
        """Test that keep reverses a discard."""
        flash = Flash()
        flash.now["error"] = "Failed"

        flash.keep("error")

        assert flash.to_session_value() == {"flashes": {"error": "Failed"}}

    def test_delete(self):
        """Test that delete removes a message immediately."""
        flash = Flash()
        flash["success"] = "Saved"

        assert flash.delete("success") == "Saved"
        assert "success" not in flash
        assert flash.delete("success") is None


class TestFlashSession:
    """Test loading and storing flash messages between requests."""

    def test_loaded_messages_visible_once(self):
        """Test that messages from the previous request are shown, then dropped."""
        flash = Flash.from_session({"flashes": {"success": "Saved"}})

        assert flash["success"] == "Saved"
        assert flash.to_session_value() is None

    def test_loaded_messages_can_be_kept(self):
        """Test that keep carries loaded messages one more request."""
        flash = Flash.from_session({"flashes": {"success": "Saved"}})

        flash.keep()

        assert flash.to_session_value() == {"flashes": {"success": "Saved"}}

    def test_empty_session(self):
        """Test loading from an empty or missing session value."""
        assert len(Flash.from_session(None)) == 0
        assert Flash.from_session({}).to_dict() == {}

    def test_new_message_replaces_loaded_one(self):
        """Test that writing a loaded key persists the new value."""
        flash = Flash.from_session({"flashes": {"success": "Old"}})
        flash["success"] = "New"

        assert flash.to_session_value() == {"flashes": {"success": "New"}}
