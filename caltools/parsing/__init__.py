"""Library for the rfc5545 text framing and content line grammar."""
