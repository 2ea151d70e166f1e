"""GuidAuth - access/refresh credential issuance and rotation."""
