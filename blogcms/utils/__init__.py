from blogcms.utils.helpers import host, post_url, site_url, slugify, utc_now
from blogcms.utils.timezone import PKT, pkt_now, to_pkt_iso, to_utc

__all__ = [
    "PKT",
    "host",
    "pkt_now",
    "post_url",
    "site_url",
    "slugify",
    "to_pkt_iso",
    "to_utc",
    "utc_now",
]
