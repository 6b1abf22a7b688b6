"""
mailkeys: DKIM key provisioning for the rspamd mail filter.

Generates signing keys through rspamadm, wires them into rspamd's
dkim_signing configuration and prints the DNS TXT record to publish.
"""

__version__ = "1.0.0"
