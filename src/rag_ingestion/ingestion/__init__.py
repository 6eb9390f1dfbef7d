"""
Ingestion — document loading, chunking, embedding and indexing.

This module is responsible for the ETL-like pipeline that converts raw
documents (PDF, Markdown, plain text) into embedded chunks stored in a
vector collection.

    discover → load → chunk → embed → ensure collection → upsert
"""
