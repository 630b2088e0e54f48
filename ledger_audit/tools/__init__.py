"""Stateless computation tools: ledger, classification, audit, anomaly, compliance"""
