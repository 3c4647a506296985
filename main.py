import os

from dental_portal import create_app

app = create_app()

def main():
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=os.getenv("FLASK_DEBUG") == "1")

if __name__ == "__main__":
    main()
