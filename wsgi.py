import sys
import os

# Add the project directory to the sys.path
project_home = os.environ.get('TASTEBUDDY_HOME', os.path.dirname(os.path.abspath(__file__)))
if project_home not in sys.path:
    sys.path.insert(0, project_home)

# Set the working directory
os.chdir(project_home)

# Import the Flask app
from app import app as application  # noqa: E402
