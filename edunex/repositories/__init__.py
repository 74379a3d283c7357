"""Data access layer (Supabase)."""
