"""Adapter package for ledger API I/O.

Purpose:
    Concrete implementations of the domain ports: the HTTP transport, the
    ``requests`` executor and the accounts resource adapter.

Dependencies:
    ``requests`` for network I/O; domain records and protocols from
    ``ledgerapi.domain``.

Call context:
    Wired by ``ledgerapi.factory`` for runtime use and constructed directly by
    tests with stub executors.
"""
