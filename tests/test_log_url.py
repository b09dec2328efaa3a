import pytest
from tunnelpage.discovery.log_url import find_tunnel_url


CLOUDFLARED_BANNER = """\
2026-10-16T10:00:00Z INF Requesting new quick Tunnel on trycloudflare.com...
2026-10-16T10:00:01Z INF +--------------------------------------------------------------------------------------------+
2026-10-16T10:00:01Z INF |  Your quick Tunnel has been created! Visit it at (it may take some time to be reachable):  |
2026-10-16T10:00:01Z INF |  https://foo-bar.trycloudflare.com                                                         |
2026-10-16T10:00:01Z INF +--------------------------------------------------------------------------------------------+
"""

def test_banner_url():
    assert find_tunnel_url(CLOUDFLARED_BANNER) == "https://foo-bar.trycloudflare.com"

def test_keeps_trailing_slash():
    assert find_tunnel_url("visit https://foo-bar.trycloudflare.com/ now") == "https://foo-bar.trycloudflare.com/"

@pytest.mark.parametrize("suffix", [".", ",", ";", ".,;"])
def test_trims_trailing_punctuation(suffix):
    text = f"url is https://abc-def.trycloudflare.com{suffix} done"
    assert find_tunnel_url(text) == "https://abc-def.trycloudflare.com"

def test_second_domain():
    assert find_tunnel_url("at https://x1.cfargotunnel.com;") == "https://x1.cfargotunnel.com"

def test_first_domain_wins_over_second():
    text = "https://b.cfargotunnel.com then https://a.trycloudflare.com"
    assert find_tunnel_url(text) == "https://a.trycloudflare.com"

def test_json_field_with_escaped_slashes():
    text = '{"level":"info","url":"https:\\/\\/json-one.trycloudflare.com","message":"ok"}'
    assert find_tunnel_url(text) == "https://json-one.trycloudflare.com"

def test_json_field_second_domain():
    text = '{"url": "https:\\/\\/json-two.cfargotunnel.com"}'
    assert find_tunnel_url(text) == "https://json-two.cfargotunnel.com"

def test_no_match():
    assert find_tunnel_url("INF Starting tunnel tunnelID=abc\nINF Registered connIndex=0") is None
    assert find_tunnel_url("") is None
    assert find_tunnel_url("http://foo.trycloudflare.com") is None

FAILED_REQUEST = (
    '2026-10-16T10:00:00Z INF Requesting new quick Tunnel on trycloudflare.com...\n'
    '2026-10-16T10:00:01Z ERR Error unmarshaling QuickTunnel response: '
    'error="failed to request quick Tunnel: Post \\"https://api.trycloudflare.com/tunnel\\": '
    'dial tcp: lookup api.trycloudflare.com: no such host"\n'
)

def test_provider_api_host_is_not_a_tunnel_url():
    assert find_tunnel_url(FAILED_REQUEST) is None
    assert find_tunnel_url('{"url": "https:\\/\\/api.trycloudflare.com\\/tunnel"}') is None

def test_tunnel_url_after_failed_request():
    text = FAILED_REQUEST + "INF |  https://api-two-words.trycloudflare.com  |\n"
    assert find_tunnel_url(text) == "https://api-two-words.trycloudflare.com"
