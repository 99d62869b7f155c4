import sys
import os

# Dodaj główny katalog do ścieżki Python
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from app import configure_logging, create_app

# Vercel wymaga obiektu o nazwie 'app'
# W środowisku serverless nie uruchamiamy schedulera w tle
configure_logging()
app = create_app(start_scheduler=False)

if __name__ == "__main__":
    app.run()
