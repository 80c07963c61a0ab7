"""AI21 Jurassic-2 models served by Amazon Bedrock."""
