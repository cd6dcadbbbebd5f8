"""
CloudSearch index maintenance: document identity, batch assembly, and the
document-service client that submits batches.
"""
