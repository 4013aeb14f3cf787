"""
Services module for business logic separation.

- code_generator: random short codes
- mapping_store: persistence of short code mappings
- url_service: creation of mappings (validation, codes, expiry)
- redirect_service: resolution of codes to live mappings
- stats_service: read-only statistics
- user_service: accounts and the default owner
"""
