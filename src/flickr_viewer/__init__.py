"""Search Flickr by tag, then view, save and thumbnail the chosen photo."""
