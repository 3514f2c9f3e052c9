"""
trust_list — maintenance tooling for a curated registry of trusted certificate issuers.

Derives issuer identities from Subject Key Identifiers, merges certificates
into trust-list.json with idempotent, rotation-aware semantics, and reports
certificate expirations.

Built on the Railway-Oriented Programming (ROP) framework for
explicit, composable, functional error handling.
"""

__version__ = "0.1.0"
