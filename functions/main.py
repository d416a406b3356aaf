# This file re-exports the functions from endpoints.py and triggers.py
# to maintain compatibility with Firebase's expected structure
from firebase_admin import initialize_app

# One Firebase app per instance, shared by every function below
initialize_app()

# Import and re-export the HTTP function
from endpoints import upload_to_mux

# Import and re-export the Firestore trigger function
from triggers import on_new_chat_message

# These exports allow Firebase to find the functions in their expected location
__all__ = ["upload_to_mux", "on_new_chat_message"]
