"""
Services for plainverse
"""
