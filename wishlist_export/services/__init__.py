"""Google authorization and Sheets persistence for exported wishlists."""
