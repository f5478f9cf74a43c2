# manage.py
# Usage: FLASK_APP=manage.py flask db upgrade
import os
from extensions import db
from app import create_app

# Create Flask app
app = create_app()


# Optional: for shell context
@app.shell_context_processor
def make_shell_context():
    from models import User, Reward
    return {"db": db, "User": User, "Reward": Reward}


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(debug=True, host="0.0.0.0", port=port)
