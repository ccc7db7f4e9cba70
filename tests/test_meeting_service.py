from skillswap_sessions.services.meeting_service import generate_meeting_url, room_name_for_session


def test_meeting_url_is_deterministic():
    assert generate_meeting_url(42) == generate_meeting_url(42)
    assert generate_meeting_url("abc") == generate_meeting_url("abc")


def test_meeting_url_uses_configured_domain_and_prefix():
    assert generate_meeting_url(7) == "https://meet.jit.si/skillswap-7"
    assert generate_meeting_url(7, domain="meet.example.org", prefix="mentor") == "https://meet.example.org/mentor-7"


def test_distinct_sessions_get_distinct_rooms():
    assert generate_meeting_url(1) != generate_meeting_url(2)


def test_room_name_is_url_safe():
    assert room_name_for_session("a b/c?d") == "skillswap-a-b-c-d"
