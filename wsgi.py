from crosspost import create_publish_app

application = create_publish_app()

if __name__ == "__main__":
    application.run()
