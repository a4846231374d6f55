"""PratikAI: profession-specialized AI chat backend."""
